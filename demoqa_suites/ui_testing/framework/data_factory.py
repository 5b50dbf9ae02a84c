"""
================================================================================
Test Data Factory
================================================================================

Factory for Web Tables user records.

Features:
- Named templates: random, updated, search_target, special_characters,
  empty, invalid_email, invalid_age
- Emails from the random template never repeat within a process run
- Deterministic mode: pass a seed to get a private seeded generator, a fixed
  clock and a private sequence, so equal seeds give equal records

================================================================================
"""

from __future__ import annotations

import itertools
import os
import random
import string
import time
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Iterator, List, Optional


# Shared by every non-deterministic factory in the process
_PROCESS_SEQUENCE: Iterator[int] = itertools.count(1)

# Fixed clock used in deterministic mode (2023-11-14T22:13:20Z)
DETERMINISTIC_EPOCH = 1_700_000_000.0


# ================================================================================
# Data Models
# ================================================================================

@dataclass(frozen=True)
class UserRecord:
    """
    A Web Tables row. Every field is a string; age and salary are
    numeric-looking strings, not numbers.
    """
    first_name: str
    last_name: str
    email: str
    age: str
    salary: str
    department: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    def search_terms(self) -> List[str]:
        """Values that identify this user in the rendered table."""
        terms = [self.first_name, self.last_name, self.email, self.department, self.salary]
        return [t for t in terms if t and t.strip()]


# Partial update: UserRecord field name -> new value
UserPatch = Dict[str, str]


# ================================================================================
# Factory
# ================================================================================

class UserDataFactory:
    """
    Generates UserRecord values from named templates.

    Usage:
        factory = UserDataFactory()
        user = factory.random()
        patch = factory.updated()
        same_again = UserDataFactory(seed=7).random() == UserDataFactory(seed=7).random()
    """

    DEPARTMENTS = [
        "Engineering",
        "Quality Assurance",
        "Marketing",
        "Sales",
        "Human Resources",
        "Finance",
        "Operations",
        "Customer Support",
    ]

    DEFAULT_CREDENTIALS = [
        {"username": "testuser", "password": "Test@123"},
        {"username": "demouser", "password": "Demo@123"},
        {"username": "user123", "password": "Password@123"},
    ]

    TEMPLATES = (
        "random",
        "updated",
        "search_target",
        "special_characters",
        "empty",
        "invalid_email",
        "invalid_age",
    )

    def __init__(
        self,
        seed: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize factory.

        Args:
            seed: Enables deterministic mode when given
            clock: Seconds-since-epoch source (defaults to time.time, or a
                fixed instant in deterministic mode)
        """
        self.seed = seed
        if seed is not None:
            self._random = random.Random(seed)
            self._clock = clock or (lambda: DETERMINISTIC_EPOCH)
            self._sequence: Iterator[int] = itertools.count(1)
        else:
            self._random = random.Random()
            self._clock = clock or time.time
            self._sequence = _PROCESS_SEQUENCE

    @property
    def deterministic(self) -> bool:
        return self.seed is not None

    def _stamp(self, digits: int = 6) -> str:
        """Trailing digits of the current time in milliseconds."""
        return str(int(self._clock() * 1000))[-digits:]

    def random_string(self, length: int = 8) -> str:
        """Random alphanumeric string (both cases)."""
        chars = string.ascii_letters + string.digits
        return "".join(self._random.choice(chars) for _ in range(length))

    def random_email(self) -> str:
        return f"{self.random_string(8)}@{self.random_string(6)}.com"

    def random_department(self) -> str:
        return self._random.choice(self.DEPARTMENTS)

    def generate_test_id(self) -> str:
        return f"test_{int(self._clock() * 1000)}_{self.random_string(9).lower()}"

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def random(self) -> UserRecord:
        """Random user: age 25-39, salary 40000-99999."""
        stamp = self._stamp()
        number = self._random.randrange(999)
        sequence = next(self._sequence)
        return UserRecord(
            first_name=f"John{stamp}",
            last_name=f"Doe{number}",
            email=f"john.doe{stamp}{number}.{sequence}@test.com",
            age=str(25 + self._random.randrange(15)),
            salary=str(40000 + self._random.randrange(60000)),
            department=self.random_department(),
        )

    def updated(self) -> UserPatch:
        """Fields for an edit: names, salary 50000-99999, department."""
        stamp = self._stamp()
        number = self._random.randrange(999)
        return {
            "first_name": f"Jane{stamp}",
            "last_name": f"Smith{number}",
            "salary": str(50000 + self._random.randrange(50000)),
            "department": self.random_department(),
        }

    def search_target(self) -> UserRecord:
        """Constant user designed for search tests."""
        return UserRecord(
            first_name="SearchTest",
            last_name="User",
            email="search.test@example.com",
            age="30",
            salary="55000",
            department="Testing",
        )

    def special_characters(self) -> UserRecord:
        """User with apostrophe, hyphen, plus-addressing and ampersand."""
        stamp = self._stamp(4)
        return UserRecord(
            first_name=f"O'Connor{stamp}",
            last_name="Smith-Jones",
            email=f"o.connor.smith+test{stamp}@example.com",
            age="28",
            salary="45000",
            department="R&D",
        )

    def empty(self) -> UserRecord:
        return UserRecord(first_name="", last_name="", email="", age="", salary="", department="")

    def invalid_email(self) -> UserRecord:
        return UserRecord(
            first_name="Invalid",
            last_name="Email",
            email="not-an-email",
            age="25",
            salary="50000",
            department="Testing",
        )

    def invalid_age(self) -> UserRecord:
        return UserRecord(
            first_name="Invalid",
            last_name="Age",
            email="invalid.age@test.com",
            age="not-a-number",
            salary="50000",
            department="Testing",
        )

    def validation_users(self) -> Dict[str, UserRecord]:
        """Empty and invalid variants keyed by name."""
        return {
            "empty": self.empty(),
            "invalid_email": self.invalid_email(),
            "invalid_age": self.invalid_age(),
        }

    def multiple_users(self, count: int = 3) -> List[UserRecord]:
        """`count` distinct users with increasing age and salary."""
        users = []
        for user_num in range(1, count + 1):
            stamp = self._stamp()
            sequence = next(self._sequence)
            users.append(UserRecord(
                first_name=f"TestUser{user_num}{stamp}",
                last_name=f"LastName{user_num}",
                email=f"testuser{user_num}.{stamp}.{sequence}@example.com",
                age=str(20 + user_num * 5),
                salary=str(30000 + user_num * 10000),
                department=self.random_department(),
            ))
        return users

    def build(self, template: str):
        """
        Build a record from a template name.

        Raises:
            ValueError: Unknown template
        """
        if template not in self.TEMPLATES:
            raise ValueError(
                f"Unknown template '{template}'. Expected one of: {', '.join(self.TEMPLATES)}"
            )
        return getattr(self, template)()

    def login_credentials(self) -> Dict[str, str]:
        """Credentials from UI_USERNAME / UI_PASSWORD, else the first default set."""
        default = self.DEFAULT_CREDENTIALS[0]
        return {
            "username": os.getenv("UI_USERNAME", default["username"]),
            "password": os.getenv("UI_PASSWORD", default["password"]),
        }


# ================================================================================
# Convenience Functions
# ================================================================================

def create_random_user() -> UserRecord:
    """Quick helper for a random user."""
    return UserDataFactory().random()


__all__ = [
    "UserRecord",
    "UserPatch",
    "UserDataFactory",
    "create_random_user",
]
