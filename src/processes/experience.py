from typing import Any, TextIO
import logging
import numbers
import numpy as np
from utils.gen_utils import copy_table_3d, verify_table_3d
from utils.standard_typevars import VISIT_DTYPE, REWARD_DTYPE
from utils.standard_typevars import VisitTable, VisitSumTable
from utils.standard_typevars import RewardTable, RewardSumTable

logger = logging.getLogger(__name__)


def get_read_only_view(table: np.ndarray) -> np.ndarray:
    """
    Read-only by convention only: the view shares memory with a writeable
    table, so a caller can still flip flags.writeable back to True.
    """
    view = table.view()
    view.flags.writeable = False
    return view


def verify_dimension(n: Any) -> bool:
    return isinstance(n, numbers.Integral) and not isinstance(n, bool)


class Experience:
    """
    Keeps track of the transitions an agent has experienced: how many times
    each (s, a, s1) has happened and the total reward it produced. Single
    events are not stored, only the running aggregates, together with
    their marginals over s1 which are kept consistent on every update.
    """

    def __init__(self, num_states: int, num_actions: int) -> None:
        if not (verify_dimension(num_states) and verify_dimension(num_actions)):
            raise ValueError(
                "Experience needs integer dimensions, got S=%r A=%r"
                % (num_states, num_actions)
            )
        if num_states < 0 or num_actions < 0:
            raise ValueError(
                "Experience needs non-negative dimensions, got S=%d A=%d"
                % (num_states, num_actions)
            )
        self.S: int = int(num_states)
        self.A: int = int(num_actions)
        self.visits: VisitTable = np.zeros(
            (self.S, self.A, self.S),
            dtype=VISIT_DTYPE
        )
        self.visits_sum: VisitSumTable = np.zeros(
            (self.S, self.A),
            dtype=VISIT_DTYPE
        )
        self.rewards: RewardTable = np.zeros(
            (self.S, self.A, self.S),
            dtype=REWARD_DTYPE
        )
        self.rewards_sum: RewardSumTable = np.zeros(
            (self.S, self.A),
            dtype=REWARD_DTYPE
        )
        logger.debug("Created Experience with S=%d A=%d", self.S, self.A)

    def check_state(self, s: int) -> None:
        if not 0 <= s < self.S:
            raise IndexError("State %d out of range [0, %d)" % (s, self.S))

    def check_action(self, a: int) -> None:
        if not 0 <= a < self.A:
            raise IndexError("Action %d out of range [0, %d)" % (a, self.A))

    def check_transition(self, s: int, a: int, s1: int) -> None:
        self.check_state(s)
        self.check_action(a)
        self.check_state(s1)

    def set_visits(self, v: Any) -> None:
        """
        Copies an external S x A x S container (anything that supports
        v[s][a][s1]) into the visits table and recomputes the visit sums.
        The table is left untouched if the shape does not match.
        """
        if not verify_table_3d(v, self.S, self.A, self.S):
            raise ValueError("Visits container does not have shape %s"
                             % str(self.visits.shape))
        new_visits = np.zeros_like(self.visits, dtype=np.int64)
        copy_table_3d(v, new_visits, self.S, self.A, self.S)
        if np.any(new_visits < 0):
            raise ValueError("Visits container holds negative counts")
        self.visits[...] = new_visits
        self.visits_sum[...] = self.visits.sum(axis=2, dtype=VISIT_DTYPE)
        logger.debug("Imported visits, %d transitions in total",
                     int(self.visits_sum.sum()))

    def set_rewards(self, r: Any) -> None:
        """
        Copies an external S x A x S container (anything that supports
        r[s][a][s1]) into the rewards table and recomputes the reward sums.
        The table is left untouched if the shape does not match.
        """
        if not verify_table_3d(r, self.S, self.A, self.S):
            raise ValueError("Rewards container does not have shape %s"
                             % str(self.rewards.shape))
        new_rewards = np.zeros_like(self.rewards)
        copy_table_3d(r, new_rewards, self.S, self.A, self.S)
        self.rewards[...] = new_rewards
        for s in range(self.S):
            for a in range(self.A):
                self.update_reward_sum(s, a)
        logger.debug("Imported rewards")

    def record(self, s: int, a: int, s1: int, rew: float) -> None:
        self.check_transition(s, a, s1)
        self.visits[s, a, s1] += 1
        self.visits_sum[s, a] += 1
        self.rewards[s, a, s1] += rew
        self.update_reward_sum(s, a)

    def update_reward_sum(self, s: int, a: int) -> None:
        # exactly the row sum, never a running total
        self.rewards_sum[s, a] = self.rewards[s, a].sum()

    def reset(self) -> None:
        self.visits.fill(0)
        self.visits_sum.fill(0)
        self.rewards.fill(0.)
        self.rewards_sum.fill(0.)
        logger.debug("Experience reset")

    def get_visits(self, s: int, a: int, s1: int) -> int:
        self.check_transition(s, a, s1)
        return int(self.visits[s, a, s1])

    def get_visits_sum(self, s: int, a: int) -> int:
        """
        Number of recorded transitions starting from (s, a)
        """
        self.check_state(s)
        self.check_action(a)
        return int(self.visits_sum[s, a])

    def get_reward(self, s: int, a: int, s1: int) -> float:
        self.check_transition(s, a, s1)
        return float(self.rewards[s, a, s1])

    def get_reward_sum(self, s: int, a: int) -> float:
        """
        Total reward of the recorded transitions starting from (s, a)
        """
        self.check_state(s)
        self.check_action(a)
        return float(self.rewards_sum[s, a])

    def get_visit_table(self) -> VisitTable:
        return get_read_only_view(self.visits)

    def get_visit_sum_table(self) -> VisitSumTable:
        return get_read_only_view(self.visits_sum)

    def get_reward_table(self) -> RewardTable:
        return get_read_only_view(self.rewards)

    def get_reward_sum_table(self) -> RewardSumTable:
        return get_read_only_view(self.rewards_sum)

    def get_s(self) -> int:
        return self.S

    def get_a(self) -> int:
        return self.A

    def __repr__(self) -> str:
        return "Experience(S=%d, A=%d, visits=%d)" %\
            (self.S, self.A, int(self.visits_sum.sum()))


def write_experience(exp: Experience, stream: TextIO) -> None:
    """
    Text format: a header line "S A", then one line per (s, a) with the
    S visit counts of that pair, then one line per (s, a) with the S
    rewards. Rewards are written with repr so they read back exactly.
    """
    stream.write("%d %d\n" % (exp.S, exp.A))
    for s in range(exp.S):
        for a in range(exp.A):
            stream.write(" ".join(str(int(x)) for x in exp.visits[s, a]))
            stream.write("\n")
    for s in range(exp.S):
        for a in range(exp.A):
            stream.write(" ".join(repr(float(x)) for x in exp.rewards[s, a]))
            stream.write("\n")


def read_experience(stream: TextIO, exp: Experience) -> None:
    """
    Reads what write_experience produced into exp. Both tables are parsed
    before anything is assigned, so a bad stream leaves exp as it was.
    """
    header = stream.readline().split()
    if len(header) != 2:
        raise ValueError("Malformed Experience header: %r" % header)
    s_count, a_count = int(header[0]), int(header[1])
    if (s_count, a_count) != (exp.S, exp.A):
        raise ValueError(
            "Stream holds an Experience with S=%d A=%d, expected S=%d A=%d"
            % (s_count, a_count, exp.S, exp.A)
        )

    def read_rows(convert):
        rows = []
        for _ in range(s_count * a_count):
            row = [convert(x) for x in stream.readline().split()]
            if len(row) != s_count:
                raise ValueError("Malformed Experience row: %r" % row)
            rows.append(row)
        return rows

    visit_rows = read_rows(int)
    reward_rows = read_rows(float)
    shape = (s_count, a_count, s_count)
    visits = np.array(visit_rows, dtype=np.int64).reshape(shape)
    rewards = np.array(reward_rows, dtype=REWARD_DTYPE).reshape(shape)
    exp.set_visits(visits)
    exp.set_rewards(rewards)
    logger.debug("Read Experience with S=%d A=%d from stream", exp.S, exp.A)


if __name__ == '__main__':
    import io
    experience = Experience(2, 1)
    experience.record(0, 0, 1, 1.0)
    experience.record(0, 0, 1, 1.0)
    experience.record(0, 0, 0, -1.0)
    print(experience)
    print(experience.get_visit_table())
    print(experience.get_reward_sum_table())
    buf = io.StringIO()
    write_experience(experience, buf)
    print(buf.getvalue())
    copy = Experience(2, 1)
    buf.seek(0)
    read_experience(buf, copy)
    print(copy.get_visits_sum(0, 0), copy.get_reward_sum(0, 0))
