import json

from finance_tracker.storage import (
    BUDGETS_KEY,
    DARK_MODE_KEY,
    DEFAULT_PREFERENCES,
    PREFERENCES_KEY,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    StoreError,
    load_dark_mode,
    load_preferences,
    read_value,
    save_dark_mode,
    save_preferences,
    write_value,
)


class _BrokenStore(KeyValueStore):
    def get(self, key):
        raise StoreError("quota exceeded")

    def set(self, key, value):
        raise StoreError("quota exceeded")

    def delete(self, key):
        raise StoreError("quota exceeded")


def test_memory_store_copies_values():
    store = MemoryStore()
    value = {'Food': 100}
    store.set(BUDGETS_KEY, value)
    value['Food'] = 1
    assert store.get(BUDGETS_KEY) == {'Food': 100}
    store.delete(BUDGETS_KEY)
    store.delete('missing')
    assert store.get(BUDGETS_KEY) is None


def test_json_file_store_missing_file(tmp_path):
    store = JsonFileStore(tmp_path / 'state.json')
    assert store.get(PREFERENCES_KEY) is None


def test_json_file_store_persists_across_instances(tmp_path):
    path = tmp_path / 'nested' / 'state.json'
    JsonFileStore(path).set(DARK_MODE_KEY, True)
    JsonFileStore(path).set(BUDGETS_KEY, {'Rent': 900.0})
    reopened = JsonFileStore(path)
    assert reopened.get(DARK_MODE_KEY) is True
    assert reopened.get(BUDGETS_KEY) == {'Rent': 900.0}
    reopened.delete(DARK_MODE_KEY)
    assert json.loads(path.read_text()) == {BUDGETS_KEY: {'Rent': 900.0}}


def test_json_file_store_corrupt_file_falls_back_to_default(tmp_path):
    path = tmp_path / 'state.json'
    path.write_text('{not json')
    store = JsonFileStore(path)
    assert read_value(store, BUDGETS_KEY, {}) == {}
    assert load_preferences(store) == DEFAULT_PREFERENCES


def test_json_file_store_replaces_corrupt_file_on_write(tmp_path):
    path = tmp_path / 'state.json'
    path.write_text('[1, 2, 3]')
    store = JsonFileStore(path)
    assert write_value(store, DARK_MODE_KEY, True)
    assert store.get(DARK_MODE_KEY) is True


def test_json_file_store_unwritable_path(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('')
    store = JsonFileStore(blocker / 'state.json')
    assert write_value(store, DARK_MODE_KEY, True) is False


def test_failing_store_is_best_effort():
    store = _BrokenStore()
    assert read_value(store, PREFERENCES_KEY, 'fallback') == 'fallback'
    assert write_value(store, PREFERENCES_KEY, {}) is False
    assert save_dark_mode(store, True) is False
    assert load_dark_mode(store) is False


def test_preferences_merge_over_defaults():
    store = MemoryStore({PREFERENCES_KEY: {'q': 'coffee', 'month': '2025-09', 'category': 3, 'extra': 'x'}})
    prefs = load_preferences(store)
    assert prefs == {'q': 'coffee', 'from': '', 'to': '', 'category': '', 'month': '2025-09'}


def test_preferences_round_trip_through_store():
    store = MemoryStore()
    assert save_preferences(store, {'q': 'rent', 'from': '2025-09-01', 'to': None, 'category': 'Rent',
                                    'month': '2025-09', 'ignored': 1})
    assert store.get(PREFERENCES_KEY) == {
        'q': 'rent', 'from': '2025-09-01', 'to': '', 'category': 'Rent', 'month': '2025-09',
    }
    assert load_preferences(store)['category'] == 'Rent'


def test_dark_mode_defaults_to_light():
    store = MemoryStore()
    assert load_dark_mode(store) is False
    save_dark_mode(store, True)
    assert load_dark_mode(store) is True
