"""UI automation for DemoQA: framework, page objects and end-to-end tests."""
