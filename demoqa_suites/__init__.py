"""
DemoQA test suites package.

Kept importable so that:
  - page objects and the framework can be imported from tests and tools
  - `run_tests.py` can address suites by path
  - unit tests can reach framework modules without a browser
"""
