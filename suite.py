import time
import traceback
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Type

_suite_state: Dict[str, List[Dict[str, Any]]] = {
    'tests': [],
    'results': []
}


class _c:
    """terminal color codes."""
    ok = '\033[92m'
    fail = '\033[91m'
    warn = '\033[93m'
    info = '\033[94m'
    grey = '\033[90m'
    reset = '\033[0m'


# --- custom exception for assertions ---

class TestAssertionError(AssertionError):
    """raised by assert_that so a failed check is told apart from a crash."""
    __test__ = False


# --- public api ---

def test(description: str) -> Callable:
    """decorator registering a function as a test case. the function stays callable by pytest."""

    def decorator(func: Callable) -> Callable:
        _suite_state['tests'].append({'func': func, 'description': description})

        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        return wrapper

    return decorator


def assert_that(condition: Any, message: str = "assertion failed") -> None:
    if not condition:
        raise TestAssertionError(message)


def assert_raises(error_type: Type[BaseException], action: Callable[[], Any],
                  message: Optional[str] = None) -> BaseException:
    """run action and require it to raise error_type. returns the caught error."""
    try:
        action()
    except error_type as error:
        return error
    except Exception as error:
        raise TestAssertionError(
            message or f"expected {error_type.__name__}, got {type(error).__name__}: {error}") from error
    raise TestAssertionError(message or f"expected {error_type.__name__}, nothing was raised")


def run(title: str = "test run", verbose_errors: bool = False) -> bool:
    """executes all registered tests, prints a report and returns true when all passed."""
    print(f"\n{_c.info}=== {title} ==={_c.reset}")
    start_time = time.perf_counter()

    _suite_state['results'] = []

    for test_item in _suite_state['tests']:
        description = test_item['description']
        error = None
        try:
            test_item['func']()
        except TestAssertionError as e:
            error = f"assertion failed: {e}"
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            if verbose_errors:
                traceback.print_exc()

        passed = error is None
        _suite_state['results'].append({'passed': passed, 'description': description, 'error': error})

        if passed:
            print(f"  {_c.ok}ok{_c.reset}    {description}")
        else:
            print(f"  {_c.fail}FAIL{_c.reset}  {description}")
            print(f"        {_c.grey}{error}{_c.reset}")

    all_passed = _print_summary(start_time)

    # clear so several suites can run in one process
    _suite_state['tests'] = []
    return all_passed


def _print_summary(start_time: float) -> bool:
    duration = (time.perf_counter() - start_time) * 1000
    results = _suite_state['results']

    total = len(results)
    failed_count = sum(1 for r in results if not r['passed'])
    summary_color = _c.ok if failed_count == 0 else _c.fail

    print(f"\n{summary_color}{total - failed_count}/{total} passed{_c.reset}"
          f" in {_c.warn}{duration:.2f}ms{_c.reset}\n")
    return failed_count == 0


# the decorator is not a test itself when pytest collects modules that import it
test.__test__ = False
