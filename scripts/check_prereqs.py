#!/usr/bin/env python3
"""
Prerequisite checker for seabattle.

Run from repo root (after activating your venv):

    python3 scripts/check_prereqs.py
"""

import random
import sys
import traceback
from pathlib import Path


def add_src_to_syspath() -> None:
    """Ensure `src/` is on sys.path so `import seabattle` works from a checkout."""
    repo_root = Path(__file__).resolve().parents[1]
    src = repo_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


def header(title: str) -> None:
    print("\n" + "=" * 72)
    print(title)
    print("=" * 72)


def check_python_version() -> bool:
    header("1) Python version")
    v = sys.version_info
    print(f"Detected Python: {v.major}.{v.minor}.{v.micro}")
    ok = (v.major == 3 and v.minor >= 10) or (v.major > 3)
    if ok:
        print("OK: Python 3.10 or newer is available.")
    else:
        print("FAIL: Python 3.10+ required for this project.")
    return ok


def check_core_imports() -> bool:
    header("2) Core library imports (numpy, pydantic, opentelemetry)")
    libs = ["numpy", "pydantic", "opentelemetry.sdk", "opentelemetry.exporter.otlp.proto.grpc"]
    all_ok = True
    for name in libs:
        try:
            __import__(name)
            print(f"OK: imported {name}")
        except Exception as exc:  # noqa: BLE001
            all_ok = False
            print(f"FAIL: could not import {name}: {exc}")
            traceback.print_exc(limit=1)
    return all_ok


def check_seabattle_imports() -> bool:
    header("3) seabattle engine / AI imports")
    add_src_to_syspath()
    try:
        from seabattle.ai.strategy import compute_opponent_move  # noqa: F401
        from seabattle.engine.combat import resolve_guess  # noqa: F401
        from seabattle.engine.match import new_match  # noqa: F401
        from seabattle.engine.placement import place_vessels  # noqa: F401

        print("OK: imported place_vessels, resolve_guess, compute_opponent_move, new_match")
        return True
    except Exception as exc:  # noqa: BLE001
        print(f"FAIL: could not import seabattle modules: {exc}")
        traceback.print_exc(limit=1)
        return False


def check_match_smoke_test() -> bool:
    header("4) Match smoke test (random human moves vs the computer)")
    add_src_to_syspath()
    try:
        from seabattle.config import GameConfig
        from seabattle.engine.match import new_match

        match = new_match(GameConfig(seed=0))
        moves = [f"{row}{col}" for row in range(10) for col in range(10)]
        random.Random(0).shuffle(moves)
        while not match.finished:
            match.play_human_turn(moves.pop())
            if not match.finished:
                match.play_computer_turn()
        print("OK: match finished.")
        print(f"    winner={match.winner.value}, turns={match.turns}")
        return True
    except Exception as exc:  # noqa: BLE001
        print(f"FAIL: match smoke test failed: {exc}")
        traceback.print_exc(limit=1)
        return False


def main() -> None:
    checks = [
        ("Python version", check_python_version),
        ("Core imports", check_core_imports),
        ("seabattle imports", check_seabattle_imports),
        ("Match smoke test", check_match_smoke_test),
    ]

    overall_ok = True
    results: list[tuple[str, bool]] = []

    for name, fn in checks:
        ok = fn()
        results.append((name, ok))
        overall_ok = overall_ok and ok

    header("Summary")
    for name, ok in results:
        status = "OK  " if ok else "FAIL"
        print(f"{status} - {name}")

    print("\n" + "=" * 72)
    if overall_ok:
        print("ALL CHECKS PASSED: you are ready to play.")
        print("Next step example:")
        print("    PYTHONPATH=src python3 -m seabattle.cli --seed 7")
    else:
        print("Some checks FAILED. Review the messages above and fix them before playing.")
    print("=" * 72)


if __name__ == "__main__":
    main()
