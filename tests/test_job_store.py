import asyncio

import pytest

from site_compiler.edit_classifier import KeywordEditClassifier
from site_compiler.field_updaters import KeywordConfigMutator
from site_compiler.firestore_job_store import FirestoreJobStore
from site_compiler.generator import SiteGenerator
from site_compiler.job_store import JobStore, generate_job_id
from site_compiler.jobs import run_site_job
from site_compiler.models.job import JobKind, JobOutputs, JobStatus


def test_job_ids_embed_the_site_id():
    assert generate_job_id("acme/site", suffix="abc123") == "job_acme-site_abc123"
    assert generate_job_id(None, suffix="abc123").startswith("job_")


def test_create_get_and_update():
    store = JobStore()
    job = store.create_job(kind=JobKind.edit, site_id="bistro")

    assert store.get_job(job.id).status is JobStatus.queued
    assert store.get_job("missing") is None

    updated = store.update_job(job.id, status=JobStatus.in_progress, progress=0.5, message="Working")

    assert updated.status is JobStatus.in_progress
    assert updated.progress == 0.5
    assert store.get_job(job.id).message == "Working"
    assert job.status is JobStatus.queued


def test_update_keeps_fields_that_are_not_given():
    store = JobStore()
    job = store.create_job(kind=JobKind.generate, site_id=None)
    store.update_job(job.id, message="first", outputs=JobOutputs(image_status="NONE"))

    record = store.update_job(job.id, progress=0.9)

    assert record.message == "first"
    assert record.outputs.image_status == "NONE"


def _keyword_generator():
    return SiteGenerator(
        config_generator=None,
        classifier=KeywordEditClassifier(),
        mutator=KeywordConfigMutator(),
    )


def test_edit_job_records_outputs(bistro):
    store = JobStore()
    job = store.create_job(kind=JobKind.edit, site_id="bistro")
    request = {"edit_text": "Change the primary color to blue", "config": bistro.to_ir()}

    asyncio.run(run_site_job(store, _keyword_generator(), job.id, JobKind.edit, request))

    record = store.get_job(job.id)
    assert record.status is JobStatus.completed
    assert record.progress == 1.0
    assert record.message == "Done"
    assert record.outputs.config["theme"]["primary"] == "blue"
    assert record.outputs.changed_paths == ["theme.primary"]
    assert "package.json" in record.outputs.files
    assert record.outputs.should_regenerate is False


def test_failed_job_is_marked_and_reraised():
    store = JobStore()
    job = store.create_job(kind=JobKind.generate, site_id=None)

    with pytest.raises(Exception):
        asyncio.run(run_site_job(store, _keyword_generator(), job.id, JobKind.generate, {"prompt": "a bakery"}))

    record = store.get_job(job.id)
    assert record.status is JobStatus.failed
    assert record.errors


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self.exists = data is not None
        self._data = data

    def to_dict(self):
        return dict(self._data)


class FakeDocument:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    def set(self, data):
        self._collection.documents[self.id] = dict(data)

    def update(self, data):
        self._collection.documents[self.id].update(data)

    def get(self):
        return FakeSnapshot(self.id, self._collection.documents.get(self.id))

    def collection(self, name):
        return self._collection.subcollections.setdefault((self.id, name), FakeCollection())


class FakeCollection:
    def __init__(self):
        self.documents = {}
        self.subcollections = {}

    def document(self, doc_id=None):
        return FakeDocument(self, doc_id or "autogen12345")

    def stream(self):
        return [FakeSnapshot(doc_id, data) for doc_id, data in self.documents.items()]


class FakeBatch:
    def __init__(self):
        self.writes = []

    def set(self, document, data):
        self.writes.append((document, data))

    def commit(self):
        for document, data in self.writes:
            document.set(data)


class FakeFirestore:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())

    def batch(self):
        return FakeBatch()


def test_firestore_store_keeps_files_out_of_the_job_document():
    client = FakeFirestore()
    store = FirestoreJobStore(client=client)

    job = store.create_job(kind=JobKind.generate, site_id="bistro")
    assert job.id == "job_bistro_autoge"

    files = {"package.json": "{}", "app/page.tsx": "export default function Home() {}"}
    store.update_job(
        job.id,
        status=JobStatus.completed,
        progress=1.0,
        outputs=JobOutputs(files=files, image_status="RESOLVED"),
    )
    record = store.get_job(job.id)

    assert record.status is JobStatus.completed
    assert record.outputs.image_status == "RESOLVED"
    assert list(record.outputs.files) == ["package.json", "app/page.tsx"]
    assert record.outputs.files["app/page.tsx"] == files["app/page.tsx"]

    jobs = client.collections["site_jobs"]
    assert jobs.documents[job.id]["status"] == "COMPLETED"
    assert "files" not in jobs.documents[job.id]["outputs"]
    assert len(jobs.subcollections[(job.id, "files")].documents) == 2
    assert store.get_job("missing") is None
