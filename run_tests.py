"""Bússola v1.0 — Standalone test runner (no pytest dependency)."""
import importlib
import inspect
import sys
import traceback
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

MODULES = [
    ("Config", "tests.test_config"),
    ("Records", "tests.test_records"),
    ("Rules", "tests.test_rules"),
    ("Finance", "tests.test_finance"),
    ("Anomalies", "tests.test_anomalies"),
    ("Patterns", "tests.test_patterns"),
    ("Projects", "tests.test_projects"),
    ("Overload", "tests.test_overload"),
    ("Projections", "tests.test_projections"),
    ("Suggestions", "tests.test_suggestions"),
    ("Weekly", "tests.test_weekly"),
    ("Insights", "tests.test_insights"),
    ("Pipeline", "tests.test_pipeline"),
]

passed = 0
failed = 0


def test(name, fn):
    global passed, failed
    try:
        fn()
        print(f"  ✓ {name}")
        passed += 1
    except Exception as e:
        print(f"  ✗ {name}: {e}")
        traceback.print_exc()
        failed += 1


def collect(module):
    """test_* functions in definition order."""
    functions = [
        fn for name, fn in inspect.getmembers(module, inspect.isfunction)
        if name.startswith("test_") and fn.__module__ == module.__name__
    ]
    return sorted(functions, key=lambda fn: fn.__code__.co_firstlineno)


for title, module_name in MODULES:
    print(f"\n[{title}]")
    module = importlib.import_module(module_name)
    for fn in collect(module):
        test(fn.__name__[len("test_"):].replace("_", " "), fn)


# ═══════════════════════════════════════════════════════════════════════
# SUMMARY
# ═══════════════════════════════════════════════════════════════════════
print(f"\n{'=' * 58}")
print(f"  {passed} passed, {failed} failed")
print(f"{'=' * 58}")
sys.exit(1 if failed else 0)
