import asyncio
import io
import os
import unittest
from types import SimpleNamespace

from fastapi import UploadFile

from resume_analyzer.config import get_settings
from resume_analyzer.routers.resumes import delete_resume, upload_resume
from resume_analyzer.services.resume_analyzer import ResumeAnalyzer

from support import SAMPLE_RESUME, FakeModelClient, make_pdf


class FakeResult:
    def __init__(self, value):
        self._value = value

    def scalar_one_or_none(self):
        return self._value


class FakeSession:
    """Records what a route does to the session; commit can be made to fail."""

    def __init__(self, row=None, commit_error=None):
        self.row = row
        self.commit_error = commit_error
        self.added = []
        self.deleted = []
        self.commits = 0

    def add(self, obj):
        self.added.append(obj)

    async def delete(self, obj):
        self.deleted.append(obj)

    async def execute(self, statement):
        return FakeResult(self.row)

    async def commit(self):
        if self.commit_error is not None:
            raise self.commit_error
        self.commits += 1

    async def refresh(self, obj):
        pass


def _resume_dir():
    return os.path.join(get_settings().uploads_dir, "resumes")


def _stored_files():
    directory = _resume_dir()
    return set(os.listdir(directory)) if os.path.isdir(directory) else set()


def _upload_file():
    return UploadFile(file=io.BytesIO(make_pdf(SAMPLE_RESUME)), filename="jane.pdf")


class UploadStorageTests(unittest.IsolatedAsyncioTestCase):
    async def test_failed_commit_removes_stored_file(self):
        before = _stored_files()
        session = FakeSession(commit_error=RuntimeError("database is locked"))

        with self.assertRaises(RuntimeError):
            await upload_resume(
                resume=_upload_file(),
                db=session,
                analyzer=ResumeAnalyzer(client=None, models=[]),
            )

        self.assertEqual(len(session.added), 1)
        self.assertEqual(_stored_files(), before)

    async def test_cancelled_upload_persists_nothing(self):
        before = _stored_files()
        started = asyncio.Event()

        async def hang():
            started.set()
            await asyncio.sleep(60)

        client = FakeModelClient({"gemini-a": hang})
        session = FakeSession()
        task = asyncio.create_task(upload_resume(
            resume=_upload_file(),
            db=session,
            analyzer=ResumeAnalyzer(client=client, models=["gemini-a", "gemini-b"]),
        ))
        await started.wait()
        task.cancel()

        with self.assertRaises(asyncio.CancelledError):
            await task
        self.assertEqual(client.calls, ["gemini-a"])
        self.assertEqual(session.added, [])
        self.assertEqual(session.commits, 0)
        self.assertEqual(_stored_files(), before)


class DeleteStorageTests(unittest.IsolatedAsyncioTestCase):
    def _stored(self, name):
        os.makedirs(_resume_dir(), exist_ok=True)
        path = os.path.join(_resume_dir(), name)
        with open(path, "wb") as f:
            f.write(b"%PDF-1.4")
        return path

    async def test_file_kept_when_delete_commit_fails(self):
        path = self._stored("kept_on_failure.pdf")
        row = SimpleNamespace(file_name="kept_on_failure.pdf")
        session = FakeSession(row=row, commit_error=RuntimeError("connection lost"))

        with self.assertRaises(RuntimeError):
            await delete_resume(resume_id=1, db=session)
        self.assertTrue(os.path.exists(path))

    async def test_file_removed_after_delete_commits(self):
        path = self._stored("removed_after_commit.pdf")
        row = SimpleNamespace(file_name="removed_after_commit.pdf")
        session = FakeSession(row=row)

        response = await delete_resume(resume_id=1, db=session)
        self.assertTrue(response.success)
        self.assertEqual(session.deleted, [row])
        self.assertEqual(session.commits, 1)
        self.assertFalse(os.path.exists(path))


if __name__ == "__main__":
    unittest.main()
