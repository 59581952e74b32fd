import pytest

from ats_console.api import ApiError
from ats_console.filters import has_active_filters, visible_pages
from ats_console.store import CandidateListStore


def page_body(ids, page=1, total=None, total_pages=1, limit=10):
    return {
        "success": True,
        "data": [{"id": i, "firstName": f"C{i}", "documents": []} for i in ids],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total if total is not None else len(ids),
            "totalPages": total_pages,
        },
    }


def error_body(message, code="VALIDATION_ERROR"):
    return {"success": False, "error": {"code": code, "message": message}}


@pytest.fixture
def store(api):
    return CandidateListStore(api)


class TestFetching:
    def test_fetch_loads_candidates_and_pagination(self, store, recorder):
        recorder.reply(body=page_body([1, 2], total=12, total_pages=2))

        store.fetch()

        assert [c["id"] for c in store.candidates] == [1, 2]
        assert store.pagination["totalPages"] == 2
        assert store.loading is False
        assert store.error is None

    def test_filter_change_resets_page(self, store, recorder):
        store.filters["page"] = 3
        recorder.reply(body=page_body([]))

        store.update_filters({"search": "ana"})

        assert store.filters["page"] == 1
        assert recorder.last.url.params["search"] == "ana"
        assert recorder.last.url.params["page"] == "1"

    def test_go_to_page_keeps_other_filters(self, store, recorder):
        store.filters["status"] = "hired"
        recorder.reply(body=page_body([]))

        store.go_to_page(2)

        assert store.filters == {"page": 2, "limit": 10, "status": "hired"}

    def test_clear_filters(self, store, recorder):
        store.filters.update({"search": "x", "page": 4})
        recorder.reply(body=page_body([]))

        store.clear_filters()

        assert store.filters == {"page": 1, "limit": 10}

    def test_fetch_failure_sets_error_and_keeps_list(self, store, recorder):
        recorder.reply(body=page_body([1]))
        store.fetch()
        recorder.reply(500, error_body("Error fetching candidates", "DATABASE_ERROR"))

        with pytest.raises(ApiError):
            store.fetch()

        assert store.error == "Error fetching candidates"
        assert [c["id"] for c in store.candidates] == [1]
        assert store.loading is False


class TestMutations:
    def test_update_replaces_local_item(self, store, recorder):
        recorder.reply(body=page_body([1, 2]))
        store.fetch()
        recorder.reply(body={"success": True, "data": {"id": 2, "status": "hired"}})

        store.update_candidate(2, {"status": "hired"})

        assert store.candidates[1] == {"id": 2, "status": "hired"}
        assert store.candidates[0]["id"] == 1

    def test_create_refreshes_the_list(self, store, recorder):
        recorder.reply(201, {"success": True, "data": {"id": 7}})
        recorder.reply(body=page_body([7]))

        created = store.create_candidate({"firstName": "Ana"})

        assert created == {"id": 7}
        assert [c["id"] for c in store.candidates] == [7]

    def test_create_succeeds_when_the_list_reload_fails(self, store, recorder):
        recorder.reply(201, {"success": True, "data": {"id": 7}})
        recorder.reply(503, error_body("list down", "INTERNAL_ERROR"))

        created = store.create_candidate({"firstName": "Ana"})

        assert created == {"id": 7}
        assert store.error == "list down"
        assert store.loading is False

    def test_delete_succeeds_when_the_page_reload_fails(self, store, recorder):
        recorder.reply(body=page_body([11], page=2, total=11, total_pages=2))
        store.go_to_page(2)
        recorder.reply(body={"success": True})
        recorder.reply(503, error_body("list down", "INTERNAL_ERROR"))

        store.delete_candidate(11)

        assert store.candidates == []
        assert store.filters["page"] == 1
        assert store.error == "list down"

    def test_delete_removes_local_item(self, store, recorder):
        recorder.reply(body=page_body([1, 2]))
        store.fetch()
        recorder.reply(body={"success": True, "message": "Candidate deleted successfully"})

        store.delete_candidate(1)

        assert [c["id"] for c in store.candidates] == [2]

    def test_deleting_last_item_steps_back_a_page(self, store, recorder):
        recorder.reply(body=page_body([11], page=2, total=11, total_pages=2))
        store.go_to_page(2)
        recorder.reply(body={"success": True})
        recorder.reply(body=page_body(list(range(1, 11)), page=1, total=10))

        store.delete_candidate(11)

        assert store.filters["page"] == 1
        assert len(store.candidates) == 10

    def test_upload_appends_document(self, store, recorder):
        recorder.reply(body=page_body([1]))
        store.fetch()
        recorder.reply(201, {"success": True, "data": {"id": 3, "originalName": "cv.pdf"}})

        store.upload_document(1, "cv.pdf", b"%PDF")

        assert store.candidates[0]["documents"] == [{"id": 3, "originalName": "cv.pdf"}]

    def test_failed_mutation_sets_error_and_reraises(self, store, recorder):
        recorder.reply(body=page_body([1]))
        store.fetch()
        recorder.reply(404, error_body("Candidate not found: 1", "NOT_FOUND"))

        with pytest.raises(ApiError):
            store.update_candidate(1, {"status": "hired"})

        assert store.error == "Candidate not found: 1"
        assert [c["id"] for c in store.candidates] == [1]


class TestVisiblePages:
    def test_small_totals_show_every_page(self):
        assert visible_pages(1, 3) == [1, 2, 3]
        assert visible_pages(1, 0) == []

    def test_window_in_the_middle(self):
        assert visible_pages(6, 12) == [1, "...", 4, 5, 6, 7, 8, "...", 12]

    def test_window_at_the_start(self):
        assert visible_pages(1, 12) == [1, 2, 3, 4, 5, "...", 12]

    def test_window_at_the_end(self):
        assert visible_pages(12, 12) == [1, "...", 10, 11, 12]

    def test_no_ellipsis_for_adjacent_edges(self):
        assert visible_pages(4, 7) == [1, 2, 3, 4, 5, 6, 7]


def test_has_active_filters():
    assert not has_active_filters({"page": 1, "limit": 10})
    assert has_active_filters({"search": "ana"})
    assert has_active_filters({"sortBy": "email"})
