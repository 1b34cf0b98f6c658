"""
Integration tests for admin application endpoints.

Covers:
  GET    /api/v1/admin/applications
  GET    /api/v1/admin/applications/export
  GET    /api/v1/admin/applications/{application_id}
  POST   /api/v1/admin/applications/{application_id}/under-review
  POST   /api/v1/admin/applications/{application_id}/request-documents
  POST   /api/v1/admin/applications/{application_id}/approve
  POST   /api/v1/admin/applications/{application_id}/reject
  DELETE /api/v1/admin/applications/{application_id}
  GET    /api/v1/admin/audit
"""

from __future__ import annotations

from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from factories import ApplicationFactory, DocumentFactory, ProfileFactory
from onboarding.models.notification import Notification
from onboarding.utils.timeutils import utcnow


async def _seed_listing(db: AsyncSession):
    """Four applications from four candidates, oldest first."""
    now = utcnow()
    seeds = [
        ("Meera Nair", "meera@example.com", "Accountant", "accepted", 4),
        ("arjun Rao", "arjun@example.com", "Clerk", "submitted", 3),
        ("Zoya Khan", "zoya@example.com", "Clerk", "rejected", 2),
        ("Dev Shah", "dev@example.com", "Cashier", "draft", 1),
    ]
    applications = []
    for name, email, post, status, age in seeds:
        profile = await ProfileFactory.create_async(db, email=email, full_name=name)
        applications.append(await ApplicationFactory.create_async(
            db,
            user_id=profile.id,
            name=name,
            email=email,
            post_applied_for=post,
            status=status,
            rejection_reason="Incomplete Information" if status == "rejected" else None,
            submitted_at=None if status == "draft" else now - timedelta(days=age),
            created_at=now - timedelta(days=age),
        ))
    return applications


class TestAdminList:
    async def test_candidates_are_refused(self, async_client: AsyncClient, candidate_headers: dict):
        response = await async_client.get("/api/v1/admin/applications", headers=candidate_headers)
        assert response.status_code == 403

    async def test_default_list_hides_drafts_newest_first(
        self, async_client: AsyncClient, admin_headers: dict, db_session: AsyncSession
    ):
        await _seed_listing(db_session)
        response = await async_client.get("/api/v1/admin/applications", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert [i["name"] for i in data["items"]] == ["Zoya Khan", "arjun Rao", "Meera Nair"]
        assert data["pagination"]["total"] == 3

    async def test_status_search_and_sort(
        self, async_client: AsyncClient, admin_headers: dict, db_session: AsyncSession
    ):
        await _seed_listing(db_session)

        approved = await async_client.get(
            "/api/v1/admin/applications", params={"status": "approved"}, headers=admin_headers
        )
        assert [i["name"] for i in approved.json()["items"]] == ["Meera Nair"]

        drafts = await async_client.get(
            "/api/v1/admin/applications", params={"status": "draft"}, headers=admin_headers
        )
        assert [i["name"] for i in drafts.json()["items"]] == ["Dev Shah"]

        search = await async_client.get(
            "/api/v1/admin/applications", params={"search": "CLERK", "sort": "name"}, headers=admin_headers
        )
        assert [i["name"] for i in search.json()["items"]] == ["arjun Rao", "Zoya Khan"]

        oldest = await async_client.get(
            "/api/v1/admin/applications", params={"sort": "oldest"}, headers=admin_headers
        )
        assert oldest.json()["items"][0]["name"] == "Meera Nair"

    async def test_pagination(self, async_client: AsyncClient, admin_headers: dict, db_session: AsyncSession):
        await _seed_listing(db_session)
        response = await async_client.get(
            "/api/v1/admin/applications", params={"limit": 2, "page": 2}, headers=admin_headers
        )
        data = response.json()
        assert len(data["items"]) == 1
        assert data["pagination"]["total_pages"] == 2
        assert data["pagination"]["has_next"] is False

    async def test_invalid_sort_is_422(self, async_client: AsyncClient, admin_headers: dict):
        response = await async_client.get(
            "/api/v1/admin/applications", params={"sort": "status"}, headers=admin_headers
        )
        assert response.status_code == 422

    async def test_export_csv(self, async_client: AsyncClient, admin_headers: dict, db_session: AsyncSession):
        await _seed_listing(db_session)
        response = await async_client.get("/api/v1/admin/applications/export", headers=admin_headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip("\n").split("\n")
        assert lines[0] == "Name,Email,Post,Status,Submitted Date"
        assert len(lines) == 4
        assert lines[1].startswith("Zoya Khan,zoya@example.com,Clerk,rejected,")


class TestAdminDecisions:
    async def test_review_then_approve(
        self,
        async_client: AsyncClient,
        admin_headers: dict,
        admin,
        submitted_application,
        db_session: AsyncSession,
    ):
        review = await async_client.post(
            f"/api/v1/admin/applications/{submitted_application.id}/under-review", headers=admin_headers
        )
        assert review.status_code == 200
        assert review.json()["status"] == "under_review"

        approve = await async_client.post(
            f"/api/v1/admin/applications/{submitted_application.id}/approve",
            json={"notes": "Strong profile"},
            headers=admin_headers,
        )
        assert approve.status_code == 200
        data = approve.json()
        assert data["status"] == "accepted"
        assert data["reviewed_by"] == str(admin.id)
        assert data["reviewed_at"] is not None
        assert data["admin_notes"] == "Strong profile"

        result = await db_session.execute(
            select(Notification).where(Notification.user_id == submitted_application.user_id)
        )
        titles = {n.title for n in result.scalars().all()}
        assert {"Application Under Review", "Application Approved!"} <= titles

    async def test_request_documents(self, async_client: AsyncClient, admin_headers: dict, submitted_application):
        response = await async_client.post(
            f"/api/v1/admin/applications/{submitted_application.id}/request-documents", headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "documents_pending"

    async def test_reject_reason_is_visible_to_candidate(
        self,
        async_client: AsyncClient,
        admin_headers: dict,
        candidate_headers: dict,
        submitted_application,
    ):
        response = await async_client.post(
            f"/api/v1/admin/applications/{submitted_application.id}/reject",
            json={"reason": "Incomplete Information"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "rejected"

        mine = await async_client.get(
            f"/api/v1/applications/{submitted_application.id}", headers=candidate_headers
        )
        assert mine.json()["status"] == "rejected"
        assert mine.json()["rejection_reason"] == "Incomplete Information"

    async def test_reject_without_reason_is_refused(
        self, async_client: AsyncClient, admin_headers: dict, submitted_application
    ):
        response = await async_client.post(
            f"/api/v1/admin/applications/{submitted_application.id}/reject",
            json={"reason": "   "},
            headers=admin_headers,
        )
        assert response.status_code == 422

    async def test_draft_cannot_be_approved(self, async_client: AsyncClient, admin_headers: dict, draft_application):
        response = await async_client.post(
            f"/api/v1/admin/applications/{draft_application.id}/approve", headers=admin_headers
        )
        assert response.status_code == 409

    async def test_rejected_cannot_be_approved(
        self, async_client: AsyncClient, admin_headers: dict, submitted_application
    ):
        await async_client.post(
            f"/api/v1/admin/applications/{submitted_application.id}/reject",
            json={"reason": "Incomplete Information"},
            headers=admin_headers,
        )
        response = await async_client.post(
            f"/api/v1/admin/applications/{submitted_application.id}/approve", headers=admin_headers
        )
        assert response.status_code == 409

    async def test_candidate_cannot_decide(
        self, async_client: AsyncClient, candidate_headers: dict, submitted_application
    ):
        response = await async_client.post(
            f"/api/v1/admin/applications/{submitted_application.id}/approve", headers=candidate_headers
        )
        assert response.status_code == 403

    async def test_admin_detail_includes_documents(
        self,
        async_client: AsyncClient,
        admin_headers: dict,
        submitted_application,
        db_session: AsyncSession,
    ):
        await DocumentFactory.create_async(db_session, application=submitted_application)
        response = await async_client.get(
            f"/api/v1/admin/applications/{submitted_application.id}", headers=admin_headers
        )
        assert response.status_code == 200
        assert len(response.json()["documents"]) == 1


class TestDeleteAndAudit:
    async def test_delete_removes_application_and_keeps_audit(
        self,
        async_client: AsyncClient,
        admin_headers: dict,
        candidate_headers: dict,
        submitted_application,
    ):
        upload = await async_client.post(
            f"/api/v1/applications/{submitted_application.id}/documents",
            data={"document_type": "pan_card"},
            files={"file": ("pan.pdf", b"%PDF-1.4\n%%EOF\n", "application/pdf")},
            headers=candidate_headers,
        )
        assert upload.status_code == 201
        await async_client.post(
            f"/api/v1/admin/applications/{submitted_application.id}/reject",
            json={"reason": "Incomplete Information"},
            headers=admin_headers,
        )

        response = await async_client.delete(
            f"/api/v1/admin/applications/{submitted_application.id}", headers=admin_headers
        )
        assert response.status_code == 204

        gone = await async_client.get(
            f"/api/v1/admin/applications/{submitted_application.id}", headers=admin_headers
        )
        assert gone.status_code == 404

        audit = await async_client.get(
            "/api/v1/admin/audit",
            params={"application_id": str(submitted_application.id)},
            headers=admin_headers,
        )
        assert audit.status_code == 200
        actions = [a["action"] for a in audit.json()]
        assert actions == ["delete_application", "reject"]
        assert audit.json()[0]["details"]["documents_removed"] == 1
        assert audit.json()[1]["details"]["reason"] == "Incomplete Information"
