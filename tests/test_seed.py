from collections import Counter

from blind75_tutor.db import init_db
from blind75_tutor.grid import GROUP_ORDER
from blind75_tutor.seed import is_seeded, seed_all, seed_problems
from blind75_tutor.store import ProgressStore


def test_seed_problems(tmp_db):
    init_db(tmp_db)
    store = ProgressStore(tmp_db)
    assert seed_problems(store) == 75
    problems = store.fetch_all_problems()
    assert len({p.title for p in problems}) == 75
    counts = Counter(p.difficulty for p in problems)
    assert counts == {"easy": 19, "medium": 49, "hard": 7}


def test_seeded_groups_are_canonical(store):
    groups = {p.problem_group for p in store.fetch_all_problems()}
    assert groups == set(GROUP_ORDER)


def test_is_seeded(tmp_db):
    init_db(tmp_db)
    store = ProgressStore(tmp_db)
    assert not is_seeded(store)
    seed_problems(store)
    assert is_seeded(store)


def test_seed_all_idempotent(tmp_db):
    init_db(tmp_db)
    store = ProgressStore(tmp_db)
    seed_all(store)
    seed_all(store)  # second call should be no-op
    assert len(store.fetch_all_problems()) == 75
