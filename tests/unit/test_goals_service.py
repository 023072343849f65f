"""Unit tests for GoalsService (lifetrack/services/goals_service.py)"""
import json
import pytest
from datetime import datetime, timedelta

from lifetrack.models import Category, Goal, User
from lifetrack.services.goals_service import GoalsService, document_key


def stored(store, key):
    return json.loads(store.documents[key])


# ============================================================================
# Initialization
# ============================================================================

@pytest.mark.asyncio
async def test_first_run_seeds_default_data(goals_service, remote_store):
    """Test first run with no documents and no seed file"""
    categories = goals_service.get_categories()

    assert [c.name for c in categories] == [
        "Career", "Education", "Health", "Finance", "Personal Development"
    ]
    assert all(len(c.goals) == 3 for c in categories)
    assert [g.id for c in categories for g in c.goals] == list(range(1, 16))

    user = goals_service.get_current_user()
    assert user.username == "User"
    assert user.total_points == 0
    assert user.level == 1

    assert stored(remote_store, "user.json")["Username"] == "User"
    assert len(stored(remote_store, "categories.json")) == 5


@pytest.mark.asyncio
async def test_initialize_loads_stored_documents(make_goals_service, remote_store):
    await remote_store.put("categories.json", [Category(id=7, name="Music", goals=[Goal(id=1)])])
    await remote_store.put("user.json", User(id=1, username="Ada", total_points=420, level=5))

    service = make_goals_service()
    await service.initialize()

    assert [c.name for c in service.get_categories()] == ["Music"]
    assert service.get_current_user().username == "Ada"
    assert service.get_current_user().total_points == 420


@pytest.mark.asyncio
async def test_initialize_keeps_stored_user_when_seeding(make_goals_service, remote_store):
    """Test seeding categories does not replace an existing profile"""
    await remote_store.put("user.json", User(id=1, username="Ada", total_points=80))

    service = make_goals_service()
    await service.initialize()

    assert len(service.get_categories()) == 5
    assert service.get_current_user().username == "Ada"
    assert service.get_current_user().total_points == 80


@pytest.mark.asyncio
async def test_initialize_from_seed_file(make_goals_service, tmp_path):
    seed = tmp_path / "goals.txt"
    seed.write_text("Reading:\n-Read 10 pages\n-Visit the library\n", encoding="utf-8")

    service = make_goals_service(seed_file_path=seed)
    await service.initialize()

    categories = service.get_categories()
    assert [c.name for c in categories] == ["Reading"]
    assert [g.description for g in categories[0].goals] == ["Read 10 pages", "Visit the library"]


@pytest.mark.asyncio
async def test_unreadable_seed_file_falls_back_to_defaults(make_goals_service, tmp_path):
    seed = tmp_path / "goals.txt"
    seed.write_bytes(b"\xff\xfe\xfa not utf-8")

    service = make_goals_service(seed_file_path=seed)
    await service.initialize()

    assert len(service.get_categories()) == 5


@pytest.mark.asyncio
async def test_missing_seed_file_falls_back_to_defaults(make_goals_service, tmp_path):
    service = make_goals_service(seed_file_path=tmp_path / "absent.txt")
    await service.initialize()

    assert len(service.get_categories()) == 5


# ============================================================================
# Complete Goal
# ============================================================================

@pytest.mark.asyncio
async def test_complete_goal_awards_points(goals_service, remote_store, clock):
    result = await goals_service.complete_goal(1, 1)

    assert result is not None
    assert result.goal_points == 10
    assert result.category_streak == 1

    goal = goals_service.get_category(1).get_goal(1)
    assert goal.is_completed is True
    assert goal.completed_date == clock()

    user = goals_service.get_current_user()
    assert user.total_points == 10
    assert user.category_completions == {"Career": 1}

    saved_goal = stored(remote_store, "categories.json")[0]["Goals"][0]
    assert saved_goal["IsCompleted"] is True
    assert stored(remote_store, "user.json")["TotalPoints"] == 10


@pytest.mark.asyncio
async def test_complete_goal_same_day_is_noop(goals_service):
    """Test completing again on the same day changes nothing"""
    await goals_service.complete_goal(1, 1)
    before = goals_service.get_current_user().model_copy(deep=True)
    streak = goals_service.get_category(1).completion_streak

    result = await goals_service.complete_goal(1, 1)

    assert result is None
    assert goals_service.get_current_user() == before
    assert goals_service.get_category(1).completion_streak == streak


@pytest.mark.asyncio
async def test_complete_goal_next_day_continues_streaks(goals_service, clock):
    await goals_service.complete_goal(1, 1)

    clock.advance(days=1)
    result = await goals_service.complete_goal(1, 2)

    assert goals_service.get_category(1).completion_streak == 2
    user = goals_service.get_current_user()
    assert user.consistency_streak == 1
    assert result.streak_bonus == 10
    # 10 (goal 1) + 5 (goal 2) + 10 (consistency streak)
    assert user.total_points == 25
    assert user.category_completions["Career"] == 2


@pytest.mark.asyncio
async def test_complete_goal_after_gap_resets_category_streak(goals_service, clock):
    await goals_service.complete_goal(1, 1)
    clock.advance(days=1)
    await goals_service.complete_goal(1, 2)
    assert goals_service.get_category(1).completion_streak == 2

    clock.advance(days=3)
    await goals_service.complete_goal(1, 3)

    assert goals_service.get_category(1).completion_streak == 1
    assert goals_service.get_current_user().consistency_streak == 1


@pytest.mark.asyncio
async def test_goal_completed_yesterday_can_be_completed_again(goals_service, clock):
    await goals_service.complete_goal(2, 4)
    clock.advance(days=1)

    result = await goals_service.complete_goal(2, 4)

    assert result is not None
    assert goals_service.get_current_user().category_completions["Education"] == 2


@pytest.mark.asyncio
async def test_balance_bonus_for_all_categories(goals_service):
    """Test one completion per category on the same day earns the bonus"""
    for category_id, goal_id in [(1, 1), (2, 4), (3, 7), (4, 10)]:
        result = await goals_service.complete_goal(category_id, goal_id)
        assert result.balance_bonus == 0

    result = await goals_service.complete_goal(5, 13)

    user = goals_service.get_current_user()
    assert result.balance_bonus == 50
    assert user.balance_bonus == 1
    # 10 + 10 + 15 + 5 + 5 goal points + 50 bonus
    assert user.total_points == 95


@pytest.mark.asyncio
async def test_balance_bonus_not_repeated_same_day(goals_service):
    for category_id, goal_id in [(1, 1), (2, 4), (3, 7), (4, 10), (5, 13)]:
        await goals_service.complete_goal(category_id, goal_id)

    result = await goals_service.complete_goal(1, 2)

    assert result.balance_bonus == 0
    assert goals_service.get_current_user().balance_bonus == 1


@pytest.mark.asyncio
async def test_complete_goal_levels_up(goals_service):
    goals_service.get_current_user().total_points = 240

    result = await goals_service.complete_goal(1, 3)

    assert result.old_level == 1
    assert result.new_level == 3
    assert result.leveled_up is True
    assert goals_service.get_current_user().level == 3


@pytest.mark.asyncio
async def test_complete_unknown_goal_is_noop(goals_service, remote_store):
    before = dict(remote_store.documents)

    assert await goals_service.complete_goal(99, 1) is None
    assert await goals_service.complete_goal(1, 99) is None
    assert remote_store.documents == before


# ============================================================================
# Reset Goal
# ============================================================================

@pytest.mark.asyncio
async def test_reset_goal_restores_points(goals_service, clock):
    """Test reset reverses the goal's points but not streaks"""
    await goals_service.complete_goal(1, 1)
    clock.advance(days=1)
    before = goals_service.get_current_user().total_points

    await goals_service.complete_goal(1, 3)
    category_streak = goals_service.get_category(1).completion_streak
    consistency_streak = goals_service.get_current_user().consistency_streak

    goal = await goals_service.reset_goal(1, 3)

    user = goals_service.get_current_user()
    assert goal.is_completed is False
    # The consistency streak bonus stays; only the goal's 20 points go
    assert user.total_points == before + 10
    assert goals_service.get_category(1).completion_streak == category_streak
    assert user.consistency_streak == consistency_streak


@pytest.mark.asyncio
async def test_reset_goal_inverse_of_complete(goals_service):
    before = goals_service.get_current_user().total_points

    await goals_service.complete_goal(4, 11)
    await goals_service.reset_goal(4, 11)

    assert goals_service.get_current_user().total_points == before


@pytest.mark.asyncio
async def test_reset_goal_keeps_level(goals_service):
    """Test level never decreases after a reset"""
    goals_service.get_current_user().total_points = 290

    await goals_service.complete_goal(4, 11)
    assert goals_service.get_current_user().level == 4

    await goals_service.reset_goal(4, 11)

    user = goals_service.get_current_user()
    assert user.total_points == 290
    assert user.level == 4


@pytest.mark.asyncio
async def test_reset_goal_allows_negative_points(goals_service):
    await goals_service.complete_goal(1, 3)
    goals_service.get_current_user().total_points = 0

    await goals_service.reset_goal(1, 3)

    assert goals_service.get_current_user().total_points == -20


@pytest.mark.asyncio
async def test_reset_incomplete_goal_is_noop(goals_service):
    assert await goals_service.reset_goal(1, 1) is None
    assert await goals_service.reset_goal(42, 1) is None
    assert goals_service.get_current_user().total_points == 0


# ============================================================================
# Add Goal
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("difficulty,points,stored_difficulty", [
    ("Easy", 5, "Easy"),
    ("Normal", 10, "Normal"),
    ("Hard", 20, "Hard"),
    ("Legendary", 10, "Normal"),
])
async def test_add_goal(goals_service, remote_store, difficulty, points, stored_difficulty):
    goal = await goals_service.add_goal(2, "Finish a course module", difficulty)

    assert goal.id == 7
    assert goal.category_id == 2
    assert goal.points == points
    assert goal.difficulty.value == stored_difficulty
    assert goals_service.get_category(2).goals[-1] is goal

    saved = stored(remote_store, "categories.json")[1]["Goals"][-1]
    assert saved["Description"] == "Finish a course module"
    assert saved["Difficulty"] == stored_difficulty


@pytest.mark.asyncio
async def test_add_goal_to_empty_category_starts_at_one(make_goals_service, remote_store):
    await remote_store.put("categories.json", [Category(id=1, name="New")])
    service = make_goals_service()
    await service.initialize()

    goal = await service.add_goal(1, "First goal")

    assert goal.id == 1
    assert goal.points == 10


@pytest.mark.asyncio
async def test_add_goal_unknown_category(goals_service):
    assert await goals_service.add_goal(99, "Nowhere") is None


# ============================================================================
# Storage Fallback
# ============================================================================

@pytest.mark.asyncio
async def test_runs_on_local_storage_without_remote(make_goals_service, local_store):
    service = make_goals_service(remote_store=None)
    await service.initialize()

    assert service.storage_mode == "local"
    assert "user.json" in local_store.documents

    await service.complete_goal(1, 1)
    assert stored(local_store, "user.json")["TotalPoints"] == 10


@pytest.mark.asyncio
async def test_remote_load_failure_switches_to_local(make_goals_service, remote_store, local_store):
    await local_store.put("user.json", User(id=1, username="Offline Ada"))
    remote_store.fail_reads = True

    service = make_goals_service()
    await service.initialize()

    assert service.use_local_storage is True
    assert service.get_current_user().username == "Offline Ada"

    await service.complete_goal(1, 1)
    assert stored(local_store, "user.json")["TotalPoints"] == 10
    assert "user.json" not in remote_store.documents


@pytest.mark.asyncio
async def test_remote_save_failure_falls_back_to_local(goals_service, remote_store, local_store):
    remote_store.fail_writes = True

    await goals_service.complete_goal(1, 1)

    assert goals_service.use_local_storage is False
    assert stored(local_store, "user.json")["TotalPoints"] == 10
    assert stored(remote_store, "user.json")["TotalPoints"] == 0


@pytest.mark.asyncio
async def test_state_updates_even_when_all_saves_fail(goals_service, remote_store, local_store):
    remote_store.fail_writes = True
    local_store.fail_writes = True

    await goals_service.complete_goal(1, 1)

    assert goals_service.get_current_user().total_points == 10


@pytest.mark.asyncio
async def test_corrupt_remote_document_switches_to_local(make_goals_service, remote_store):
    remote_store.documents["categories.json"] = b"{not json"

    service = make_goals_service()
    await service.initialize()

    assert service.storage_mode == "local"
    assert len(service.get_categories()) == 5


# ============================================================================
# Namespaces
# ============================================================================

def test_document_key():
    assert document_key("categories.json", "") == "categories.json"
    assert document_key("user.json", "abc-123") == "user_abc-123.json"


@pytest.mark.asyncio
async def test_switch_namespace_loads_identity_documents(goals_service, remote_store):
    await remote_store.put("categories_abc.json", [Category(id=1, name="Travel")])
    await remote_store.put("user_abc.json", User(id=1, username="Ada", total_points=300, level=4))

    switched = await goals_service.switch_namespace("abc")

    assert switched is True
    assert goals_service.categories_key == "categories_abc.json"
    assert [c.name for c in goals_service.get_categories()] == ["Travel"]
    assert goals_service.get_current_user().total_points == 300


@pytest.mark.asyncio
async def test_switch_namespace_seeds_new_identity(goals_service, remote_store):
    await goals_service.complete_goal(1, 1)

    await goals_service.switch_namespace("new-user")

    assert goals_service.get_current_user().total_points == 0
    assert stored(remote_store, "user_new-user.json")["Username"] == "User"
    assert stored(remote_store, "user.json")["TotalPoints"] == 10


@pytest.mark.asyncio
async def test_switch_to_same_namespace_does_not_reload(goals_service, remote_store):
    await goals_service.switch_namespace("abc")
    reads = len(remote_store.reads)

    assert await goals_service.switch_namespace("abc") is False
    assert len(remote_store.reads) == reads


@pytest.mark.asyncio
async def test_update_user_persists(goals_service, remote_store):
    user = goals_service.get_current_user()
    user.username = "Grace"

    await goals_service.update_user(user)

    assert stored(remote_store, "user.json")["Username"] == "Grace"
