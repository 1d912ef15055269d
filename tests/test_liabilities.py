from finance_tracker.models.liability import Liability, LiabilityType
from tests.conftest import make_liability


class TestLiabilityCreation:
    """Tests for creating liabilities"""

    def test_create_liability_success(self, client, owner_headers, org_a):
        data = {
            "name": "Mortgage",
            "type": "MORTGAGE",
            "interest_rate": 6.25,
            "minimum_payment": 1850.00,
            "due_date": 1,
            "institution": "Wells Fargo",
        }

        response = client.post("/api/liabilities", headers=owner_headers, json=data)

        assert response.status_code == 201
        liability = response.json()
        assert liability["type"] == "MORTGAGE"
        assert liability["interest_rate"] == 6.25
        assert liability["minimum_payment"] == 1850.00
        assert liability["due_date"] == 1
        assert liability["organization_id"] == org_a.id

    def test_create_liability_all_types(self, client, owner_headers):
        for liability_type in LiabilityType:
            response = client.post(
                "/api/liabilities",
                headers=owner_headers,
                json={"name": liability_type.value, "type": liability_type.value},
            )
            assert response.status_code == 201

    def test_interest_rate_out_of_range(self, client, owner_headers):
        response = client.post(
            "/api/liabilities",
            headers=owner_headers,
            json={"name": "Loan", "type": "PERSONAL_LOAN", "interest_rate": 101},
        )

        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"][-1] == "interest_rate"

    def test_negative_minimum_payment(self, client, owner_headers):
        response = client.post(
            "/api/liabilities",
            headers=owner_headers,
            json={"name": "Loan", "type": "AUTO_LOAN", "minimum_payment": -5},
        )
        assert response.status_code == 422

    def test_due_date_must_be_day_of_month(self, client, owner_headers):
        for due_date in (0, 32):
            response = client.post(
                "/api/liabilities",
                headers=owner_headers,
                json={"name": "Card", "type": "CREDIT_CARD", "due_date": due_date},
            )
            assert response.status_code == 422

    def test_viewer_cannot_create(self, client, viewer_headers):
        response = client.post(
            "/api/liabilities", headers=viewer_headers, json={"name": "Card", "type": "CREDIT_CARD"}
        )
        assert response.status_code == 403


class TestLiabilityLifecycle:
    def test_list_and_get(self, client, db_session, owner_headers, alice, org_a):
        liability = make_liability(db_session, org_a, alice)

        listed = client.get("/api/liabilities", headers=owner_headers).json()
        assert listed["total"] == 1
        assert listed["liabilities"][0]["name"] == "Visa"

        response = client.get(f"/api/liabilities/{liability.id}", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["balances"] == []

    def test_update_interest_rate(self, client, db_session, member_headers, alice, org_a):
        liability = make_liability(db_session, org_a, alice)

        response = client.patch(
            f"/api/liabilities/{liability.id}", headers=member_headers, json={"interest_rate": 19.99}
        )

        assert response.status_code == 200
        assert response.json()["interest_rate"] == 19.99

    def test_soft_delete_then_include_inactive(self, client, db_session, admin_headers, alice, org_a):
        liability = make_liability(db_session, org_a, alice)

        assert client.delete(f"/api/liabilities/{liability.id}", headers=admin_headers).status_code == 204

        assert client.get("/api/liabilities", headers=admin_headers).json()["total"] == 0
        response = client.get(
            f"/api/liabilities/{liability.id}?include_inactive=true", headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_member_cannot_delete(self, client, db_session, member_headers, alice, org_a):
        liability = make_liability(db_session, org_a, alice)

        response = client.delete(f"/api/liabilities/{liability.id}", headers=member_headers)

        assert response.status_code == 403

    def test_hard_delete(self, client, db_session, owner_headers, alice, org_a):
        liability = make_liability(db_session, org_a, alice)
        liability_id = liability.id

        response = client.delete(f"/api/liabilities/{liability_id}?hard=true", headers=owner_headers)

        assert response.status_code == 204
        db_session.expire_all()
        assert db_session.get(Liability, liability_id) is None

    def test_missing_liability(self, client, owner_headers):
        response = client.get("/api/liabilities/424242", headers=owner_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Liability not found"
