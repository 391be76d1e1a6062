import pytest

from marketplace.data.unit_of_work import UnitOfWork


class RecordingSession:
    def __init__(self, fail_commit=False):
        self.fail_commit = fail_commit
        self.calls = []

    def commit(self):
        self.calls.append("commit")
        if self.fail_commit:
            raise RuntimeError("constraint violated at flush")

    def rollback(self):
        self.calls.append("rollback")


class TestUnitOfWork:
    def test_commits_on_clean_exit(self):
        session = RecordingSession()

        with UnitOfWork(session):
            pass

        assert session.calls == ["commit"]

    def test_rolls_back_on_error_inside_block(self):
        session = RecordingSession()

        with pytest.raises(ValueError):
            with UnitOfWork(session):
                raise ValueError("boom")

        assert session.calls == ["rollback"]

    def test_rolls_back_when_commit_fails(self):
        session = RecordingSession(fail_commit=True)

        with pytest.raises(RuntimeError, match="constraint"):
            with UnitOfWork(session):
                pass

        assert session.calls == ["commit", "rollback"]
