import ast
import inspect
import textwrap
from collections.abc import AsyncGenerator, Iterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from career_pathway.agents.interview_graph import reset_interview_graph
from career_pathway.core.config import settings
from career_pathway.providers import factory
from career_pathway.providers.llm.base import TaskType
from career_pathway.providers.llm.mock_adapter import MockLLMProvider


@pytest.fixture
def mock_llm() -> Iterator[MockLLMProvider]:
    """Fixture that provides mock LLM and resets after test.

    Injects a MockLLMProvider into the factory singleton so the API
    dependencies pick it up. By default the advisory call returns an empty
    reply (forcing the deterministic fallback) and extraction returns
    nothing.

    Yields:
        MockLLMProvider instance.
    """
    mock = MockLLMProvider(
        {
            TaskType.CAREER_ADVISORY: "",
            TaskType.FREE_TEXT_EXTRACTION: '{"extracted": {}, "confidence": 0.0}',
        }
    )

    # Inject mock into factory singleton
    factory._llm_provider = mock

    yield mock

    # Reset after test
    factory.reset_providers()


@pytest_asyncio.fixture
async def client(
    mock_llm: MockLLMProvider,  # noqa: ARG001
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client over the ASGI app with the mock LLM injected.

    Args:
        mock_llm: Mock provider (ensures no network calls).

    Yields:
        Configured AsyncClient for API requests.
    """
    from career_pathway.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def deterministic_client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with advisory calls disabled.

    Yields:
        Configured AsyncClient for API requests.
    """
    from career_pathway.main import app

    original_enabled = settings.advisory_enabled
    settings.advisory_enabled = False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    settings.advisory_enabled = original_enabled


@pytest.fixture(autouse=True)
def reset_graph() -> Iterator[None]:
    """Reset the compiled interview graph between tests.

    Yields:
        None (autouse fixture).
    """
    reset_interview_graph()
    yield
    reset_interview_graph()


@pytest.fixture(autouse=True)
def disable_rate_limiting() -> Iterator[None]:
    """Disable rate limiting during tests.

    Security: Rate limiting is tested separately; disable for other tests
    to avoid flaky failures from rate limit triggers.

    Yields:
        None (autouse fixture).
    """
    from career_pathway.core.rate_limiting import limiter

    # Store original state and disable
    original_enabled = limiter.enabled
    limiter.enabled = False

    yield

    # Restore original state
    limiter.enabled = original_enabled


# =============================================================================
# Test Antipattern Detection (warning-only)
# =============================================================================

_BANNED_FUNCTIONS = frozenset({"isinstance", "issubclass", "hasattr"})


def _find_antipatterns_in_source(source: str) -> list[str]:
    """Scan test function source for structural assertion patterns."""
    try:
        tree = ast.parse(textwrap.dedent(source))
    except SyntaxError:
        return []

    return [
        node.func.id
        for node in ast.walk(tree)
        if isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id in _BANNED_FUNCTIONS
    ]


_antipattern_warnings: list[str] = []


def pytest_runtest_teardown(item: pytest.Item) -> None:
    """Check each test for antipattern usage after it runs."""
    if not hasattr(item, "obj") or not callable(item.obj):
        return
    try:
        source = inspect.getsource(item.obj)
    except (OSError, TypeError):
        return

    patterns = _find_antipatterns_in_source(source)
    if patterns:
        _antipattern_warnings.append(f"  {item.nodeid}: {', '.join(patterns)}")


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
) -> None:
    """Report test antipatterns at the end of the test session (warning only)."""
    if _antipattern_warnings:
        terminalreporter.section("test antipattern warnings")
        terminalreporter.line(
            "The following tests assert on types or attributes instead of behaviour:"
        )
        terminalreporter.line("")
        for w in _antipattern_warnings:
            terminalreporter.line(w)
