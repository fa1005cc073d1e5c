"""
Tests for undo/redo state management.

Covers:
- HistoryManager as a standalone snapshot stack
- Jumping to arbitrary history entries
- Scene snapshot capture and restore through undo/redo
- Gesture commits from the transform engine
"""
import pytest

from components.transform import TransformEngine
from models.scene import Scene
from models.transform import Rect, Vec2
from utils.history_manager import HistoryManager
from conftest import add_box


# ══════════════════════════════════════════════════════════════════════════
# HistoryManager (standalone state stack)
# ══════════════════════════════════════════════════════════════════════════

class TestHistoryStack:

    @pytest.fixture
    def history(self):
        return HistoryManager(max_history=50)

    def push(self, history, *values):
        for value in values:
            history.save_state({'n': value}, f"step {value}")

    # ── undo / redo ─────────────────────────────────────────────────

    def test_starts_empty(self, history):
        assert (history.can_undo(), history.can_redo()) == (False, False)
        assert history.current_index == -1
        assert history.undo() is None

    def test_first_state_is_baseline(self, history):
        self.push(history, 1)
        assert not history.can_undo()
        assert history.get_current_description() == 'step 1'

    def test_undo_then_redo(self, history):
        self.push(history, 1, 2, 3)
        assert history.undo() == {'n': 2}
        assert history.undo() == {'n': 1}
        assert history.undo() is None
        assert history.redo() == {'n': 2}
        assert history.redo() == {'n': 3}
        assert history.redo() is None

    def test_new_state_discards_redo_branch(self, history):
        self.push(history, 1, 2, 3)
        history.undo()
        history.undo()
        self.push(history, 9)
        assert not history.can_redo()
        assert history.get_descriptions() == ['step 1', 'step 9']

    # ── isolation ───────────────────────────────────────────────────

    def test_saved_state_detached_from_caller(self, history):
        state = {'layers': [{'id': 'a'}]}
        history.save_state(state, 'add')
        history.save_state({'layers': []}, 'remove')
        state['layers'].append({'id': 'b'})
        assert history.undo() == {'layers': [{'id': 'a'}]}

    def test_returned_state_detached_from_history(self, history):
        self.push(history, 1, 2)
        restored = history.undo()
        restored['n'] = 'changed'
        history.redo()
        assert history.undo() == {'n': 1}

    # ── capacity ────────────────────────────────────────────────────

    def test_oldest_entries_trimmed(self):
        history = HistoryManager(max_history=3)
        for value in range(1, 6):
            history.save_state({'n': value}, f"step {value}")
        assert history.get_descriptions() == ['step 3', 'step 4', 'step 5']
        assert history.current_index == 2

    # ── jump ────────────────────────────────────────────────────────

    def test_jump_to_entry(self, history):
        self.push(history, 1, 2, 3, 4)
        assert history.jump_to(1) == {'n': 2}
        assert history.get_undo_description() == 'step 1'
        assert history.get_redo_description() == 'step 3'
        assert history.jump_to(3) == {'n': 4}
        assert not history.can_redo()

    @pytest.mark.parametrize('index', [-1, 4, 10])
    def test_jump_out_of_range(self, history, index):
        self.push(history, 1, 2, 3, 4)
        with pytest.raises(IndexError, match="out of range"):
            history.jump_to(index)

    # ── listeners ───────────────────────────────────────────────────

    def test_listeners_receive_availability(self, history):
        events = []
        history.add_listener(lambda can_undo, can_redo: events.append((can_undo, can_redo)))
        self.push(history, 1, 2)
        history.undo()
        history.jump_to(1)
        assert events == [(False, False), (True, False), (False, True), (True, False)]

    def test_failing_listener_does_not_block_others(self, history):
        events = []

        def broken(can_undo, can_redo):
            raise RuntimeError('listener failure')

        history.add_listener(broken)
        history.add_listener(lambda can_undo, can_redo: events.append(can_undo))
        self.push(history, 1)
        assert events == [False]

    def test_removed_listener_not_called(self, history):
        events = []
        listener = lambda can_undo, can_redo: events.append(1)
        history.add_listener(listener)
        history.remove_listener(listener)
        history.remove_listener(listener)
        self.push(history, 1)
        assert events == []

    def test_clear(self, history):
        self.push(history, 1, 2)
        history.clear()
        assert history.history == []
        assert history.current_index == -1
        assert history.get_current_description() == ''


# ══════════════════════════════════════════════════════════════════════════
# Scene workflows
# ══════════════════════════════════════════════════════════════════════════

class TestSceneUndo:
    """Capture after each edit, undo, restore, verify"""

    @pytest.fixture
    def tracked(self, scene):
        history = HistoryManager()
        history.save_state(scene.get_snapshot(), 'Initial')
        return scene, history

    def edit(self, scene, history, action, description):
        action()
        history.save_state(scene.get_snapshot(), description)

    def test_undo_add_layer(self, tracked):
        scene, history = tracked
        self.edit(scene, history, lambda: add_box(scene, 'a', (0, 0, 50, 50)), 'Add layer')
        assert scene.get_layer_count() == 1

        scene.set_snapshot(history.undo())
        assert scene.get_layer_count() == 0

        scene.set_snapshot(history.redo())
        assert scene.get_layer_ids() == ['a']

    def test_undo_size_removal(self, tracked):
        scene, history = tracked
        self.edit(scene, history, lambda: add_box(scene, 'a', (0, 0, 50, 50), size='728x90'), 'Add layer')
        self.edit(scene, history, lambda: scene.remove_size('728x90'), 'Remove size')
        assert not scene.get_layer('a').has_size('728x90')

        scene.set_snapshot(history.undo())
        assert scene.has_size('728x90')
        assert scene.get_layer_rect('a', '728x90') == Rect(0, 0, 50, 50)

    def test_restore_notifies_listeners(self, tracked):
        scene, history = tracked
        self.edit(scene, history, lambda: add_box(scene, 'a', (0, 0, 50, 50)), 'Add layer')
        events = []
        scene.add_listener(events.append)
        scene.set_snapshot(history.undo())
        assert events == ['Restore snapshot']


# ══════════════════════════════════════════════════════════════════════════
# Gesture commits
# ══════════════════════════════════════════════════════════════════════════

class TestGestureHistory:

    @pytest.fixture
    def setup(self, scene):
        add_box(scene, 'a', (40, 40, 60, 60))
        history = HistoryManager()
        history.save_state(scene.get_snapshot(), 'Initial')
        engine = TransformEngine(scene, '300x250', snapping_enabled=False,
                                 commit_hook=history.save_state)
        return scene, history, engine

    def test_one_entry_per_gesture(self, setup):
        scene, history, engine = setup
        engine.begin_drag('a', Vec2(0, 0))
        for step in range(1, 6):
            engine.move(Vec2(step * 2, step))
        engine.end()
        assert history.get_descriptions() == ['Initial', 'Move layer']

    def test_undo_gesture(self, setup):
        scene, history, engine = setup
        engine.begin_resize('a', 'se', Vec2(0, 0))
        engine.move(Vec2(20, 20))
        engine.end()
        assert scene.get_layer_rect('a', '300x250') == Rect(40, 40, 80, 80)

        scene.set_snapshot(history.undo())
        assert scene.get_layer_rect('a', '300x250') == Rect(40, 40, 60, 60)
        scene.set_snapshot(history.redo())
        assert scene.get_layer_rect('a', '300x250') == Rect(40, 40, 80, 80)

    def test_click_without_move_adds_nothing(self, setup):
        scene, history, engine = setup
        engine.begin_drag('a', Vec2(0, 0))
        engine.end()
        assert history.get_descriptions() == ['Initial']

    def test_baseline_restores_scene(self, setup):
        scene, history, engine = setup
        engine.begin_drag('a', Vec2(0, 0))
        engine.move(Vec2(30, 0))
        engine.end()
        restored = Scene.from_dict(history.history[0]['data'])
        scene.set_snapshot(history.undo())
        assert restored.get_layer_rect('a', '300x250') == scene.get_layer_rect('a', '300x250')
