"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests:
in-memory stand-ins for the record store and Moodle collaborators, and an
in-memory SQLite database for the SQL-backed implementations.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from config import Settings  # noqa: E402
from psg.adaptive.models import CourseModule, CourseSection  # noqa: E402
from psg.core.style_vector import StyleVector  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (SQLite in memory)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# ========================================
# In-memory collaborators
# ========================================


class FakeStore:
    """RecordStore kept in dictionaries, counting every write."""

    def __init__(self):
        self.module_styles: dict[int, dict[int, StyleVector]] = {}
        self.scores: list = []
        self.insert_calls = 0
        self.delete_calls = 0
        self.inserted: list[int] = []
        self.deleted: list[int] = []

    def load_module_styles(self, course_id):
        return dict(self.module_styles.get(course_id, {}))

    def get_module_style(self, course_id, module_id):
        return self.module_styles.get(course_id, {}).get(module_id)

    def insert_module_styles(self, course_id, styles):
        self.insert_calls += 1
        self.inserted.extend(styles)
        self.module_styles.setdefault(course_id, {}).update(styles)

    def delete_module_styles(self, course_id, module_ids):
        self.delete_calls += 1
        course = self.module_styles.get(course_id, {})
        for module_id in module_ids:
            self.deleted.append(module_id)
            course.pop(module_id, None)

    def replace_learner_scores(self, course_id, scores):
        self.scores = [s for s in self.scores if s.course_id != course_id] + list(scores)

    def learner_scores(self, user_id, course_id=None):
        return [
            s for s in self.scores
            if s.user_id == user_id and (course_id is None or s.course_id == course_id)
        ]

    def delete_learner_scores(self, user_id=None, course_id=None):
        if user_id is None and course_id is None:
            raise ValueError("delete_learner_scores needs a user_id or a course_id")
        keep = [
            s for s in self.scores
            if not ((user_id is None or s.user_id == user_id) and (course_id is None or s.course_id == course_id))
        ]
        removed = len(self.scores) - len(keep)
        self.scores = keep
        return removed

    def learners_with_scores(self, course_id):
        return sorted({s.user_id for s in self.scores if s.course_id == course_id})


class FakeCatalog:
    def __init__(self, modules=None, sections=None, learners=None):
        self.modules: dict[int, list[CourseModule]] = modules or {}
        self.sections: dict[int, list[CourseSection]] = sections or {}
        self.learners: dict[int, list[int]] = learners or {}

    def course_ids(self):
        return sorted(self.modules)

    def course_modules(self, course_id):
        return list(self.modules.get(course_id, []))

    def course_sections(self, course_id):
        return list(self.sections.get(course_id, []))

    def learner_ids(self, course_id):
        return list(self.learners.get(course_id, []))


class FakeContent:
    def __init__(self, pages=None, links=None):
        self.pages: dict[int, str] = pages or {}
        self.links: dict[int, str] = links or {}

    def page_html(self, module):
        return self.pages.get(module.id)

    def link_url(self, module):
        return self.links.get(module.id)


class FakeFetcher:
    """ContentFetcher stand-in; unknown URLs behave like unreachable links."""

    def __init__(self, documents=None):
        self.documents: dict[str, str] = documents or {}
        self.requested: list[str] = []

    def fetch(self, url):
        self.requested.append(url)
        return self.documents.get(url)


class FakeAnalytics:
    """SurveySource and AnalyticsSource in one, like BehaviourAnalyticsSource."""

    def __init__(self):
        self.enabled: set[int] = set()
        self.responses: dict[tuple[int, int], list[int]] = {}
        self.predictions: dict = {}
        self.clusters: dict = {}
        self.links: dict = {}
        self.toggled_off: set[tuple[int, int]] = set()

    def analytics_enabled(self, course_id):
        return course_id in self.enabled

    def survey_responses(self, course_id, user_id):
        return self.responses.get((course_id, user_id), [])

    def prediction_selection(self, course_id):
        if course_id not in self.enabled:
            return None
        return self.predictions.get(course_id)

    def cluster_assignment(self, course_id, user_id, selection):
        return self.clusters.get((course_id, user_id))

    def common_links(self, course_id, selection, cluster):
        return list(self.links.get((course_id, cluster.cluster_number), []))

    def personalisation_enabled(self, course_id, user_id):
        return (course_id, user_id) not in self.toggled_off


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings():
    """Default settings, isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def content():
    return FakeContent()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def analytics():
    return FakeAnalytics()


# ========================================
# SQLite
# ========================================


@pytest.fixture
def sqlite_engine():
    """Shared in-memory SQLite engine (one connection for every session)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    from psg.db.database import init_db

    init_db(sqlite_engine)
    return sessionmaker(bind=sqlite_engine, autoflush=False)
