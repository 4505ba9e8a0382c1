import random
import unittest
from collections import Counter

from application import messages
from domain import engine
from domain.errors import GameLogicError, Rejected
from domain.models import WIN_SCORE, Lobby, Player, Playing


def _lobby(*user_ids):
    session = Lobby()
    for user_id in user_ids:
        session, _ = engine.join(session, user_id, f"Name{user_id}")
    return session


def _playing(*scores, turn=0, turn_score=0):
    players = tuple(
        Player(user_id=i, name=f"Name{i}", score=score) for i, score in enumerate(scores)
    )
    return Playing(players=players, turn=turn, turn_score=turn_score)


class ShuffleTests(unittest.TestCase):
    def test_returns_permutation_without_touching_input(self):
        items = list(range(10))
        shuffled = engine.shuffle_players(items, random.Random(3))
        self.assertEqual(sorted(shuffled), items)
        self.assertEqual(items, list(range(10)))

    def test_seeded_source_is_reproducible(self):
        first = engine.shuffle_players("abcdef", random.Random(42))
        second = engine.shuffle_players("abcdef", random.Random(42))
        self.assertEqual(first, second)

    def test_every_permutation_of_three_occurs(self):
        rng = random.Random(7)
        counts = Counter(tuple(engine.shuffle_players("abc", rng)) for _ in range(3000))
        self.assertEqual(len(counts), 6)
        for count in counts.values():
            # Expected 500 each; generous bounds keep this stable.
            self.assertGreater(count, 400)
            self.assertLess(count, 600)


class JoinTests(unittest.TestCase):
    def test_distinct_joins_are_all_registered(self):
        session = _lobby(1, 2, 3, 4)
        self.assertEqual(len(session.players), 4)
        self.assertEqual(session.players[3].score, 0)

    def test_duplicate_join_is_rejected(self):
        session, _ = engine.join(Lobby(), 1, "alice")
        after, result = engine.join(session, 1, "alice")
        self.assertIsInstance(result, Rejected)
        self.assertEqual(result.error, GameLogicError.ALREADY_JOINED)
        self.assertEqual(result.user_id, 1)
        self.assertIs(after, session)
        self.assertEqual(len(after.players), 1)

    def test_join_while_playing_is_rejected(self):
        session = _playing(0, 0)
        after, result = engine.join(session, 99, "late")
        self.assertEqual(result.error, GameLogicError.JOIN_AFTER_START)
        self.assertIs(after, session)

    def test_premium_flag_sticks_to_lobby(self):
        session, _ = engine.join(Lobby(), 1, "vip", "vip", is_premium=True)
        session, _ = engine.join(session, 2, "plain")
        self.assertTrue(session.is_premium)


class StartTests(unittest.TestCase):
    def test_not_enough_players(self):
        for session in (Lobby(), _lobby(1)):
            after, result = engine.start(session)
            self.assertEqual(result.error, GameLogicError.NOT_ENOUGH_PLAYERS)
            self.assertIs(after, session)

    def test_already_playing(self):
        session = _playing(0, 0)
        after, result = engine.start(session)
        self.assertEqual(result.error, GameLogicError.ALREADY_PLAYING)
        self.assertIs(after, session)

    def test_start_produces_permutation_of_joined_players(self):
        session = _lobby(1, 2, 3, 4, 5)
        after, result = engine.start(session, random.Random(11))
        self.assertIsInstance(after, Playing)
        self.assertEqual(after.turn, 0)
        self.assertEqual(after.turn_score, 0)
        self.assertEqual({p.user_id for p in after.players}, {1, 2, 3, 4, 5})
        self.assertEqual(result.first_player, after.players[0])

    def test_either_of_two_players_can_start(self):
        # alice and bob: both must show up as first player across trials.
        session, _ = engine.join(Lobby(), "alice", "alice")
        session, _ = engine.join(session, "bob", "bob")
        firsts = Counter()
        for seed in range(400):
            after, result = engine.start(session, random.Random(seed))
            self.assertEqual(after.turn, 0)
            firsts[result.first_player.user_id] += 1
        self.assertEqual(set(firsts), {"alice", "bob"})
        self.assertGreater(firsts["alice"], 120)
        self.assertGreater(firsts["bob"], 120)


class RollTests(unittest.TestCase):
    def test_roll_in_lobby_is_rejected(self):
        session = _lobby(1, 2)
        after, result = engine.roll_die(session, 1, 4)
        self.assertEqual(result.error, GameLogicError.NOT_PLAYING)
        self.assertIs(after, session)

    def test_roll_out_of_turn_is_rejected(self):
        session = _playing(10, 20, turn=0, turn_score=5)
        after, result = engine.roll_die(session, 1, 4, "Name1")
        self.assertEqual(result.error, GameLogicError.WRONG_TURN)
        self.assertEqual(result.name, "Name1")
        self.assertIs(after, session)

    def test_out_of_range_values_are_ignored(self):
        session = _playing(0, 0)
        for value in (0, 7, -1, 100):
            after, result = engine.roll_die(session, 0, value)
            self.assertIsNone(result)
            self.assertIs(after, session)

    def test_non_integer_values_are_ignored(self):
        session = _playing(0, 0)
        for value in (3.0, True, "3", None):
            after, result = engine.roll_die(session, 0, value)
            self.assertIsNone(result)
            self.assertIs(after, session)

    def test_rolling_one_loses_turn(self):
        session = _playing(0, 0, turn=0)
        after, result = engine.roll_die(session, 0, 1)
        self.assertIsInstance(result, engine.TurnLost)
        self.assertEqual(result.lost_score, 0)
        self.assertEqual(after.turn, 1)
        self.assertEqual(after.turn_score, 0)
        self.assertEqual(result.next_player.user_id, 1)

    def test_rolling_one_forfeits_unbanked_points(self):
        session = _playing(30, 40, 50, turn=2, turn_score=17)
        after, result = engine.roll_die(session, 2, 1)
        self.assertEqual(result.lost_score, 17)
        self.assertEqual(after.turn, 0)
        self.assertEqual(after.turn_score, 0)
        self.assertEqual([p.score for p in after.players], [30, 40, 50])

    def test_other_values_accumulate(self):
        session = _playing(10, 0, turn_score=6)
        after, result = engine.roll_die(session, 0, 5)
        self.assertIsInstance(result, engine.Continue)
        self.assertEqual(after.turn, 0)
        self.assertEqual(after.turn_score, 11)
        self.assertEqual(result.turn_score, 11)
        self.assertEqual(result.total, 21)
        self.assertEqual(after.players[0].score, 10)

    def test_reaching_threshold_finishes_round(self):
        session = _playing(97, 0)
        after, result = engine.roll_die(session, 0, 3)
        self.assertIsInstance(result, engine.RoundFinished)
        self.assertEqual(result.winner.score, 100)
        self.assertEqual(after.players[0].score, 100)
        self.assertEqual(after.turn_score, 0)

        lobby = engine.reset(after)
        self.assertIsInstance(lobby, Lobby)
        self.assertEqual(len(lobby.players), 0)

    def test_threshold_banks_whole_turn(self):
        session = _playing(90, 0, turn_score=8)
        after, result = engine.roll_die(session, 0, 6)
        self.assertEqual(after.players[0].score, 104)
        self.assertEqual(result.standings.rows[0].is_winner, True)


class BankTests(unittest.TestCase):
    def test_bank_moves_turn_score_and_advances(self):
        session = _playing(0, 50, 0, turn=1, turn_score=12)
        after, result = engine.bank(session, 1)
        self.assertIsInstance(result, engine.Banked)
        self.assertEqual(after.players[1].score, 62)
        self.assertEqual(after.turn, 2)
        self.assertEqual(after.turn_score, 0)
        self.assertEqual(result.total, 62)
        self.assertEqual(result.turn_score, 12)
        self.assertEqual(result.next_player.user_id, 2)

    def test_bank_wraps_around(self):
        session = _playing(0, 0, turn=1, turn_score=3)
        after, _ = engine.bank(session, 1)
        self.assertEqual(after.turn, 0)

    def test_bank_out_of_turn(self):
        session = _playing(0, 0, turn=0, turn_score=9)
        after, result = engine.bank(session, 1)
        self.assertEqual(result.error, GameLogicError.WRONG_TURN)
        self.assertIs(after, session)

    def test_bank_in_lobby(self):
        session = _lobby(1, 2)
        after, result = engine.bank(session, 1)
        self.assertEqual(result.error, GameLogicError.NOT_PLAYING)
        self.assertIs(after, session)


class ResetAndSnapshotTests(unittest.TestCase):
    def test_reset_from_any_state(self):
        for session in (Lobby(), _lobby(1, 2, 3), _playing(5, 60, turn=1, turn_score=4)):
            lobby = engine.reset(session)
            self.assertIsInstance(lobby, Lobby)
            self.assertEqual(len(lobby.players), 0)
            self.assertFalse(lobby.is_premium)

    def test_lobby_snapshot_lists_names_only(self):
        session, _ = engine.join(Lobby(), 1, "Alice", "alice")
        session, _ = engine.join(session, 2, "Bob")
        snap = engine.snapshot(session)
        self.assertIsInstance(snap, engine.LobbySnapshot)
        self.assertEqual(sorted(snap.names), ["Alice (alice)", "Bob"])

    def test_playing_snapshot_marks_current_and_winners(self):
        session = _playing(100, 3, 120, turn=1)
        snap = engine.snapshot(session)
        self.assertEqual(
            [(r.is_current, r.is_winner) for r in snap.rows],
            [(False, True), (True, False), (False, True)],
        )
        self.assertEqual(snap.rows[1].text, "Name1: 3")

        text = messages.scores_list(snap.rows)
        self.assertEqual(text.count(messages.KING_EMOJI), 2)
        self.assertEqual(text.count(messages.DICE_EMOJI), 1)

    def test_winner_crown_takes_precedence_over_dice(self):
        session = _playing(100, 0, turn=0)
        text = messages.scores_list(engine.snapshot(session).rows)
        self.assertIn(f"{messages.KING_EMOJI} Name0: 100", text)
        self.assertNotIn(messages.DICE_EMOJI, text)


class RandomPlayPropertyTests(unittest.TestCase):
    """Drive seeded random games and check the scoring rules after every step."""

    def _new_game(self, rng, count):
        session = _lobby(*range(count))
        session, _ = engine.start(session, rng)
        return session

    def test_random_games_respect_scoring_rules(self):
        for seed in range(40):
            rng = random.Random(seed)
            count = rng.randint(2, 5)
            session = self._new_game(rng, count)
            finished = 0

            for _ in range(400):
                current = session.current_player
                actor = current.user_id if rng.random() < 0.8 else rng.randrange(count)
                before = session

                if rng.random() < 0.75:
                    value = rng.randint(1, 6)
                    session, result = engine.roll_die(before, actor, value)
                else:
                    value = None
                    session, result = engine.bank(before, actor)

                if actor != current.user_id:
                    self.assertEqual(result.error, GameLogicError.WRONG_TURN)
                    self.assertIs(session, before)
                    continue

                if value is None:
                    self.assertEqual(
                        session.players[before.turn].score,
                        current.score + before.turn_score,
                    )
                    self.assertEqual(session.turn, before.next_turn())
                    self.assertEqual(session.turn_score, 0)
                elif value == 1:
                    self.assertIsInstance(result, engine.TurnLost)
                    self.assertEqual(result.lost_score, before.turn_score)
                    self.assertEqual(session.turn, before.next_turn())
                    self.assertEqual(session.turn_score, 0)
                    self.assertEqual(session.players, before.players)
                elif current.score + before.turn_score + value >= WIN_SCORE:
                    self.assertIsInstance(result, engine.RoundFinished)
                    self.assertEqual(
                        result.winner.score, current.score + before.turn_score + value
                    )
                    self.assertEqual(session.turn_score, 0)
                    finished += 1
                    session = self._new_game(rng, count)
                    continue
                else:
                    self.assertIsInstance(result, engine.Continue)
                    self.assertEqual(session.turn, before.turn)
                    self.assertEqual(session.turn_score, before.turn_score + value)

                for old, new in zip(before.players, session.players):
                    self.assertGreaterEqual(new.score, old.score)
                    self.assertLess(new.score, WIN_SCORE)
                self.assertTrue(0 <= session.turn < len(session.players))


if __name__ == "__main__":
    unittest.main()
