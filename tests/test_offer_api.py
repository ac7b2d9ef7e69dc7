"""Integration tests for the offers HTTP API.

Run with: pytest tests/test_offer_api.py -v
"""

import uuid

import pytest
from django.core.cache import cache
from jose import jwt
from rest_framework.test import APIClient

from offers.cache import OFFER_LIST_KEY


def create_offer(client: APIClient, **overrides) -> dict:
    body = {
        "title": "Tango orchestra",
        "description": "Milonga on Saturday",
        "genre": "tango",
        "location": "Buenos Aires",
    }
    body.update(overrides)
    response = client.post("/api/offers", body, format="json")
    assert response.status_code == 201, response.data
    return response.json()


def apply(client: APIClient, offer_id: str, motivation: str = "") -> dict:
    response = client.post(
        f"/api/offers/{offer_id}/applications", {"motivation": motivation}, format="json"
    )
    assert response.status_code == 201, response.data
    return response.json()


@pytest.fixture
def as_organizer(client_for, organizer):
    return client_for(organizer)


@pytest.fixture
def as_musician(client_for, musician):
    return client_for(musician)


@pytest.fixture
def as_second_musician(client_for, second_musician):
    return client_for(second_musician)


@pytest.mark.django_db
class TestAuthentication:
    def test_create_requires_token(self, api_client):
        response = api_client.post("/api/offers", {"title": "x"}, format="json")

        assert response.status_code == 401
        assert response["WWW-Authenticate"] == "Bearer"

    def test_invalid_token(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not.a.token")

        response = api_client.post("/api/offers", {}, format="json")

        assert response.status_code == 401

    def test_token_with_unknown_role(self, api_client, settings):
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "role": "admin"},
            settings.AUTH_TOKEN_SECRET,
            algorithm=settings.AUTH_TOKEN_ALGORITHM,
        )
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.post("/api/offers", {}, format="json")

        assert response.status_code == 401

    def test_token_signed_with_other_secret(self, api_client, settings):
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "role": "organizer"},
            "some-other-secret",
            algorithm=settings.AUTH_TOKEN_ALGORITHM,
        )
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.post("/api/offers", {}, format="json")

        assert response.status_code == 401


@pytest.mark.django_db
class TestOfferEndpoints:
    def test_create_and_get_offer(self, api_client, as_organizer, organizer):
        created = create_offer(as_organizer)

        response = api_client.get(f"/api/offers/{created['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["organizer_id"] == str(organizer.user_id)
        assert body["status"] == "open"
        assert body["has_accepted"] is False
        assert body["applications"] == []

    def test_musician_cannot_create_offer(self, as_musician):
        response = as_musician.post(
            "/api/offers", {"title": "x", "description": "y"}, format="json"
        )

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_create_validates_body(self, as_organizer):
        response = as_organizer.post("/api/offers", {"title": "x"}, format="json")

        assert response.status_code == 400

    def test_list_offers_with_filters(self, api_client, as_organizer):
        create_offer(as_organizer, genre="rock")
        create_offer(as_organizer, genre="jazz")

        everything = api_client.get("/api/offers")
        rock = api_client.get("/api/offers", {"genre": "rock"})

        assert len(everything.json()) == 2
        assert [o["genre"] for o in rock.json()] == ["rock"]

    def test_unfiltered_list_is_cached(self, api_client, as_organizer):
        create_offer(as_organizer)

        api_client.get("/api/offers")

        assert len(cache.get(OFFER_LIST_KEY)) == 1

    def test_list_cache_invalidated_by_new_offer(
        self, api_client, as_organizer, django_capture_on_commit_callbacks
    ):
        create_offer(as_organizer)
        api_client.get("/api/offers")

        with django_capture_on_commit_callbacks(execute=True):
            create_offer(as_organizer, title="Second")

        assert len(api_client.get("/api/offers").json()) == 2

    def test_get_offer_not_found(self, api_client):
        response = api_client.get(f"/api/offers/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"code": "OFFER_NOT_FOUND", "message": "Offer not found"}

    def test_get_offer_invalid_id_format(self, api_client):
        response = api_client.get("/api/offers/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"

    def test_update_offer(
        self, api_client, as_organizer, django_capture_on_commit_callbacks
    ):
        created = create_offer(as_organizer)
        api_client.get(f"/api/offers/{created['id']}")

        with django_capture_on_commit_callbacks(execute=True):
            response = as_organizer.patch(
                f"/api/offers/{created['id']}", {"location": "Rosario"}, format="json"
            )

        assert response.status_code == 200
        assert api_client.get(f"/api/offers/{created['id']}").json()["location"] == "Rosario"

    def test_update_by_other_organizer_forbidden(self, as_organizer, client_for, other_organizer):
        created = create_offer(as_organizer)

        response = client_for(other_organizer).patch(
            f"/api/offers/{created['id']}", {"title": "Mine"}, format="json"
        )

        assert response.status_code == 403

    def test_delete_offer(self, api_client, as_organizer):
        created = create_offer(as_organizer)

        response = as_organizer.delete(f"/api/offers/{created['id']}")

        assert response.status_code == 204
        assert api_client.get(f"/api/offers/{created['id']}").status_code == 404

    def test_set_status(self, as_organizer):
        created = create_offer(as_organizer)

        response = as_organizer.put(
            f"/api/offers/{created['id']}/status", {"status": "cancelled"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"


@pytest.mark.django_db
class TestApplicationEndpoints:
    def test_accept_and_close_scenario(self, as_organizer, as_musician, as_second_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"], "I know every tango")
        b = apply(as_second_musician, offer["id"])

        response = as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{a['id']}",
            {"status": "accepted", "close_offer": True},
            format="json",
        )

        assert response.status_code == 200
        body = response.json()
        statuses = {x["id"]: x["status"] for x in body["applications"]}
        assert statuses == {a["id"]: "accepted", b["id"]: "rejected"}
        assert body["has_accepted"] is True
        assert body["status"] == "closed"
        assert body["close_date"] is not None

    def test_reject_before_accept(self, as_organizer, as_musician, as_second_musician):
        offer = create_offer(as_organizer)
        apply(as_musician, offer["id"])
        b = apply(as_second_musician, offer["id"])

        response = as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{b['id']}",
            {"status": "rejected"},
            format="json",
        )

        body = response.json()
        assert body["has_accepted"] is False
        assert [x["status"] for x in body["applications"]] == ["pending", "rejected"]

    def test_duplicate_application(self, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        apply(as_musician, offer["id"])

        response = as_musician.post(
            f"/api/offers/{offer['id']}/applications", {"motivation": "again"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "DUPLICATE_APPLICATION"

    def test_apply_to_closed_offer(self, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        as_organizer.put(f"/api/offers/{offer['id']}/status", {"status": "closed"}, format="json")

        response = as_musician.post(f"/api/offers/{offer['id']}/applications", {}, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "OFFER_CLOSED"

    def test_organizer_cannot_apply(self, as_organizer):
        offer = create_offer(as_organizer)

        response = as_organizer.post(f"/api/offers/{offer['id']}/applications", {}, format="json")

        assert response.status_code == 403

    def test_accept_twice_is_invalid(self, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"])
        url = f"/api/offers/{offer['id']}/applications/{a['id']}"
        as_organizer.put(url, {"status": "accepted"}, format="json")

        response = as_organizer.put(url, {"status": "rejected"}, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TRANSITION"

    def test_accept_on_cancelled_offer_is_invalid(self, api_client, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"])
        as_organizer.put(
            f"/api/offers/{offer['id']}/status", {"status": "cancelled"}, format="json"
        )

        response = as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{a['id']}",
            {"status": "accepted", "close_offer": True},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TRANSITION"
        body = api_client.get(f"/api/offers/{offer['id']}").json()
        assert body["status"] == "cancelled"
        assert body["has_accepted"] is False
        assert [x["status"] for x in body["applications"]] == ["pending"]

    def test_decision_with_unknown_status(self, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"])

        response = as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{a['id']}",
            {"status": "maybe"},
            format="json",
        )

        assert response.status_code == 400

    def test_unknown_application(self, as_organizer):
        offer = create_offer(as_organizer)

        response = as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{uuid.uuid4()}",
            {"status": "accepted"},
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["code"] == "APPLICATION_NOT_FOUND"

    def test_list_applications_owner_only(self, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        apply(as_musician, offer["id"], "hello")

        owner_view = as_organizer.get(f"/api/offers/{offer['id']}/applications")
        musician_view = as_musician.get(f"/api/offers/{offer['id']}/applications")

        assert [x["motivation"] for x in owner_view.json()] == ["hello"]
        assert musician_view.status_code == 403

    def test_cancel_pending_application(self, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"])

        response = as_musician.delete(f"/api/applications/{a['id']}")

        assert response.status_code == 204
        remaining = as_organizer.get(f"/api/offers/{offer['id']}/applications").json()
        assert remaining == []

    def test_cancel_accepted_application_fails(self, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"])
        as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{a['id']}",
            {"status": "accepted"},
            format="json",
        )

        response = as_musician.delete(f"/api/applications/{a['id']}")

        assert response.status_code == 400
        assert len(as_organizer.get(f"/api/offers/{offer['id']}/applications").json()) == 1

    def test_cancel_someone_elses_application(self, as_organizer, as_musician, as_second_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"])

        response = as_second_musician.delete(f"/api/applications/{a['id']}")

        assert response.status_code == 403

    def test_my_applications(self, as_organizer, as_musician, musician, second_musician):
        offer = create_offer(as_organizer, title="Summer fest")
        apply(as_musician, offer["id"])

        mine = as_musician.get(f"/api/musicians/{musician.user_id}/applications")
        theirs = as_musician.get(f"/api/musicians/{second_musician.user_id}/applications")

        assert [x["offer"]["title"] for x in mine.json()] == ["Summer fest"]
        assert mine.json()[0]["application"]["status"] == "pending"
        assert theirs.status_code == 403


@pytest.mark.django_db
class TestRatingEndpoints:
    @pytest.fixture
    def accepted(self, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"])
        as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{a['id']}",
            {"status": "accepted", "close_offer": True},
            format="json",
        )
        return offer, a

    def test_rate_accepted_application(self, api_client, as_organizer, musician, accepted):
        offer, a = accepted

        response = as_organizer.post(
            f"/api/offers/{offer['id']}/applications/{a['id']}/rating",
            {"score": 5, "comment": "Wonderful"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["rated"] is True
        ratings = api_client.get(f"/api/musicians/{musician.user_id}/ratings").json()
        assert [(r["score"], r["comment"]) for r in ratings] == [(5, "Wonderful")]

    def test_score_out_of_range(self, as_organizer, accepted):
        offer, a = accepted

        response = as_organizer.post(
            f"/api/offers/{offer['id']}/applications/{a['id']}/rating",
            {"score": 9},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_rate_pending_not_eligible(self, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"])

        response = as_organizer.post(
            f"/api/offers/{offer['id']}/applications/{a['id']}/rating",
            {"score": 4},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["code"] == "NOT_ELIGIBLE"

    def test_musician_cannot_rate(self, as_musician, accepted):
        offer, a = accepted

        response = as_musician.post(
            f"/api/offers/{offer['id']}/applications/{a['id']}/rating",
            {"score": 4},
            format="json",
        )

        assert response.status_code == 403


@pytest.mark.django_db
class TestOrganizerRatingEndpoints:
    @pytest.fixture
    def accepted(self, as_organizer, as_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"])
        as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{a['id']}",
            {"status": "accepted", "close_offer": True},
            format="json",
        )
        return offer, a

    def test_musician_rates_organizer(self, api_client, as_musician, organizer, accepted):
        offer, _ = accepted

        response = as_musician.post(
            f"/api/offers/{offer['id']}/organizer-rating",
            {"score": 5, "comment": "Great crowd"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["organizer_rated"] is True
        ratings = api_client.get(f"/api/organizers/{organizer.user_id}/ratings").json()
        assert [(r["score"], r["comment"]) for r in ratings] == [(5, "Great crowd")]

    def test_rejected_musician_not_eligible(self, as_organizer, as_musician, as_second_musician):
        offer = create_offer(as_organizer)
        a = apply(as_musician, offer["id"])
        apply(as_second_musician, offer["id"])
        as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{a['id']}",
            {"status": "accepted"},
            format="json",
        )

        response = as_second_musician.post(
            f"/api/offers/{offer['id']}/organizer-rating", {"score": 1}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "NOT_ELIGIBLE"

    def test_organizer_cannot_rate_themselves(self, as_organizer, accepted):
        offer, _ = accepted

        response = as_organizer.post(
            f"/api/offers/{offer['id']}/organizer-rating", {"score": 5}, format="json"
        )

        assert response.status_code == 403

    def test_check_rated(self, as_organizer, as_musician, organizer, musician, accepted):
        offer, a = accepted
        check = f"/api/offers/{offer['id']}/ratings/check"

        assert as_organizer.get(f"{check}/{musician.user_id}").json() == {"rated": False}
        as_organizer.post(
            f"/api/offers/{offer['id']}/applications/{a['id']}/rating",
            {"score": 4},
            format="json",
        )

        assert as_organizer.get(f"{check}/{musician.user_id}").json() == {"rated": True}
        assert as_musician.get(f"{check}/{organizer.user_id}").json() == {"rated": False}

    def test_check_rated_requires_token(self, api_client, musician, accepted):
        offer, _ = accepted

        response = api_client.get(f"/api/offers/{offer['id']}/ratings/check/{musician.user_id}")

        assert response.status_code == 401


@pytest.mark.django_db
class TestHistoryEndpoints:
    def test_organizer_history(self, as_organizer, as_musician, musician):
        offer = create_offer(as_organizer, title="Last night")
        create_offer(as_organizer, title="Still open")
        a = apply(as_musician, offer["id"])
        as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{a['id']}",
            {"status": "accepted", "close_offer": True},
            format="json",
        )

        response = as_organizer.get("/api/history/organizer")

        assert response.status_code == 200
        body = response.json()
        assert [e["offer"]["title"] for e in body] == ["Last night"]
        assert body[0]["musician_ids"] == [str(musician.user_id)]

    def test_musician_history(self, as_organizer, as_musician):
        offer = create_offer(as_organizer, title="Gig")
        a = apply(as_musician, offer["id"])
        as_organizer.put(
            f"/api/offers/{offer['id']}/applications/{a['id']}",
            {"status": "accepted"},
            format="json",
        )

        body = as_musician.get("/api/history/musician").json()

        assert [(e["offer"]["title"], e["application_id"], e["rated"]) for e in body] == [
            ("Gig", a["id"], False)
        ]

    def test_history_is_role_specific(self, as_organizer, as_musician):
        assert as_musician.get("/api/history/organizer").status_code == 403
        assert as_organizer.get("/api/history/musician").status_code == 403
