"""
Career postings: bilingual create, partial update, filters, toggles.
"""
import pytest
from pydantic import ValidationError as SchemaError

from hiring_api.errors import NotFoundError, ValidationError
from hiring_api.schemas import CareerCreate, CareerUpdate
from hiring_api.services import careers as svc

from conftest import career_payload


class TestCareerService:
    def test_textarea_lists_are_split_on_newlines(self, session):
        payload = CareerCreate(
            **career_payload(
                responsibilities={"en": "Install units\r\n\nService chillers\n", "ar": "تركيب\nصيانة"},
            )
        )
        career = svc.create_career(session, payload)
        assert career.responsibilities_en == ["Install units", "Service chillers"]
        assert career.responsibilities_ar == ["تركيب", "صيانة"]
        assert career.requirements_en == []

    def test_employment_type_synonyms_are_normalized(self, session):
        payload = CareerCreate(**career_payload(employment_type={"en": "part time", "ar": "دوام جزئي"}))
        assert svc.create_career(session, payload).employment_type_en == "Part-Time"

    def test_unknown_employment_type_is_rejected(self):
        with pytest.raises(SchemaError) as exc:
            CareerCreate(**career_payload(employment_type={"en": "Gig", "ar": "عقد"}))
        assert "employment_type" in str(exc.value)

    def test_title_needs_both_languages(self):
        with pytest.raises(SchemaError):
            CareerCreate(**career_payload(title={"en": "Welder"}))

    def test_toggle_twice_restores_flag(self, session, make_career):
        career = make_career()
        assert svc.toggle_career(session, career.id).is_active is False
        assert svc.toggle_career(session, career.id).is_active is True

    def test_partial_update_keeps_untouched_fields(self, session, make_career):
        career = make_career(description={"en": "Old", "ar": "قديم"})
        updated = svc.update_career(
            session, career.id, CareerUpdate(location={"en": "Jeddah", "ar": "جدة"}, title=None)
        )
        assert updated.location_en == "Jeddah"
        assert updated.title_en == "HVAC Technician"
        assert updated.description_en == "Old"

    def test_update_can_clear_optional_text(self, session, make_career):
        career = make_career(description={"en": "Old", "ar": "قديم"})
        updated = svc.update_career(session, career.id, CareerUpdate(description=None))
        assert updated.description_en is None and updated.description_ar is None

    def test_filters_use_requested_language(self, session, make_career):
        make_career()
        make_career(
            department={"en": "Sales", "ar": "المبيعات"},
            employment_type={"en": "Contract", "ar": "عقد"},
        )
        assert len(svc.list_careers(session, department="Sales")) == 1
        assert len(svc.list_careers(session, department="المبيعات", lang="ar")) == 1
        assert svc.list_careers(session, department="المبيعات") == []
        assert len(svc.list_careers(session, employment_type="full time")) == 1
        assert len(svc.list_careers(session, employment_type="عقد", lang="ar")) == 1

    def test_active_filter(self, session, make_career):
        make_career()
        make_career(is_active=False)
        assert len(svc.list_careers(session, is_active=True)) == 1
        assert len(svc.list_careers(session)) == 2

    def test_missing_career(self, session):
        with pytest.raises(NotFoundError):
            svc.get_career(session, 1)

    def test_bulk_delete(self, session, make_career):
        ids = [make_career().id, make_career().id]
        assert svc.bulk_delete_careers(session, ids + [500]) == 2
        with pytest.raises(NotFoundError):
            svc.bulk_delete_careers(session, ids)
        with pytest.raises(ValidationError):
            svc.bulk_delete_careers(session, ["x"])


class TestCareersApi:
    def test_create_requires_staff(self, client, user_headers):
        assert client.post("/careers/create", json=career_payload()).status_code == 401
        assert client.post("/careers/create", json=career_payload(), headers=user_headers).status_code == 403

    def test_create_and_read_back(self, client, staff_headers):
        resp = client.post("/careers/create", json=career_payload(), headers=staff_headers)
        assert resp.status_code == 201
        career_id = resp.json()["data"]["id"]

        body = client.get(f"/careers/{career_id}").json()
        assert body["career"]["title"] == {"en": "HVAC Technician", "ar": "فني تكييف"}

    def test_invalid_payload_is_400_envelope(self, client, staff_headers):
        resp = client.post("/careers/create", json={"title": {"en": "x", "ar": "y"}}, headers=staff_headers)
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_language_projection(self, client, make_career):
        make_career()
        body = client.get("/careers/lang/ar").json()
        assert body["careers"][0]["title"] == "فني تكييف"
        assert body["careers"][0]["employment_type"] == "دوام كامل"
        assert client.get("/careers/lang/fr").status_code == 400

    def test_toggle_update_delete(self, client, make_career, staff_headers):
        career_id = make_career().id
        toggled = client.patch(f"/careers/{career_id}/toggle", headers=staff_headers).json()
        assert toggled["career"]["is_active"] is False

        updated = client.put(
            f"/careers/{career_id}", json={"order": 2, "location": {"en": "Dammam", "ar": "الدمام"}}, headers=staff_headers
        ).json()
        assert updated["data"]["order"] == 2
        assert updated["data"]["location"]["en"] == "Dammam"

        assert client.delete(f"/careers/{career_id}", headers=staff_headers).status_code == 200
        assert client.get(f"/careers/{career_id}").status_code == 404

    def test_bulk_delete(self, client, make_career, staff_headers):
        ids = [make_career().id, make_career().id]
        resp = client.post("/careers/bulk-delete", json={"ids": ids}, headers=staff_headers)
        assert resp.json()["deleted_count"] == 2
        resp = client.post("/careers/bulk-delete", json={"ids": "1"}, headers=staff_headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Please provide an array of IDs to delete"
