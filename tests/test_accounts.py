from finance_tracker.models.account import Account, AccountType
from finance_tracker.models.balance import Balance
from tests.conftest import make_account, make_user, headers_for


class TestAccountCreation:
    """Tests for creating accounts"""

    def test_create_account_success(self, client, owner_headers, alice, org_a):
        """Member of an organization can create an account"""
        data = {"name": "Chase Checking", "type": "CHECKING", "institution": "Chase"}

        response = client.post("/api/accounts", headers=owner_headers, json=data)

        assert response.status_code == 201
        account = response.json()
        assert account["name"] == "Chase Checking"
        assert account["type"] == "CHECKING"
        assert account["currency"] == "USD"
        assert account["organization_id"] == org_a.id
        assert account["created_by"] == alice.id
        assert account["is_active"] is True
        assert account["latest_balance"] is None

    def test_create_account_all_types(self, client, owner_headers):
        """All account types can be created"""
        for account_type in AccountType:
            data = {"name": f"Test {account_type.value}", "type": account_type.value}
            response = client.post("/api/accounts", headers=owner_headers, json=data)

            assert response.status_code == 201
            assert response.json()["type"] == account_type.value

    def test_currency_is_uppercased(self, client, owner_headers):
        response = client.post(
            "/api/accounts", headers=owner_headers, json={"name": "Euro", "type": "SAVINGS", "currency": "eur"}
        )
        assert response.status_code == 201
        assert response.json()["currency"] == "EUR"

    def test_invalid_currency_rejected(self, client, owner_headers):
        response = client.post(
            "/api/accounts", headers=owner_headers, json={"name": "Bad", "type": "SAVINGS", "currency": "EURO"}
        )
        assert response.status_code == 422

    def test_create_account_missing_name(self, client, owner_headers):
        """Creating account without name should fail"""
        response = client.post("/api/accounts", headers=owner_headers, json={"type": "CHECKING"})
        assert response.status_code == 422

    def test_create_account_invalid_type(self, client, owner_headers):
        response = client.post("/api/accounts", headers=owner_headers, json={"name": "X", "type": "checking"})
        assert response.status_code == 422

    def test_payload_cannot_choose_organization_or_creator(
        self, client, owner_headers, alice, bob, org_a, org_b
    ):
        """organization_id and created_by come from the caller's membership"""
        data = {
            "name": "Sneaky",
            "type": "CHECKING",
            "organization_id": org_b.id,
            "created_by": bob.id,
        }

        response = client.post("/api/accounts", headers=owner_headers, json=data)

        assert response.status_code == 201
        assert response.json()["organization_id"] == org_a.id
        assert response.json()["created_by"] == alice.id

    def test_member_can_create(self, client, member_headers):
        response = client.post("/api/accounts", headers=member_headers, json={"name": "M", "type": "OTHER"})
        assert response.status_code == 201

    def test_viewer_cannot_create(self, client, viewer_headers):
        response = client.post("/api/accounts", headers=viewer_headers, json={"name": "V", "type": "OTHER"})

        assert response.status_code == 403
        body = response.json()
        assert body["action"] == "create"
        assert body["required_role"] == "MEMBER"


class TestAccountRetrieval:
    """Tests for listing and fetching accounts"""

    def test_list_accounts_empty(self, client, owner_headers):
        response = client.get("/api/accounts", headers=owner_headers)

        assert response.status_code == 200
        assert response.json() == {"accounts": [], "total": 0}

    def test_list_accounts_in_creation_order(self, client, db_session, owner_headers, alice, org_a):
        make_account(db_session, org_a, alice, name="First")
        make_account(db_session, org_a, alice, name="Second")

        response = client.get("/api/accounts", headers=owner_headers)

        assert response.status_code == 200
        assert [a["name"] for a in response.json()["accounts"]] == ["First", "Second"]
        assert response.json()["total"] == 2

    def test_list_includes_latest_balance(self, client, db_session, owner_headers, alice, org_a):
        account = make_account(db_session, org_a, alice)
        client.post(
            "/api/balances",
            headers=owner_headers,
            json={"account_id": account.id, "amount": 100, "date": "2026-01-31"},
        )
        client.post(
            "/api/balances",
            headers=owner_headers,
            json={"account_id": account.id, "amount": 250.5, "date": "2026-02-28"},
        )

        response = client.get("/api/accounts", headers=owner_headers)

        latest = response.json()["accounts"][0]["latest_balance"]
        assert latest["amount"] == 250.5
        assert latest["date"] == "2026-02-28"

    def test_viewer_can_read(self, client, db_session, viewer_headers, alice, org_a):
        make_account(db_session, org_a, alice)

        response = client.get("/api/accounts", headers=viewer_headers)

        assert response.status_code == 200
        assert response.json()["total"] == 1

    def test_get_account_with_balance_history(self, client, db_session, owner_headers, alice, org_a):
        account = make_account(db_session, org_a, alice)
        for day, amount in (("2026-01-01", 10), ("2026-03-01", 30), ("2026-02-01", 20)):
            client.post(
                "/api/balances",
                headers=owner_headers,
                json={"account_id": account.id, "amount": amount, "date": day},
            )

        response = client.get(f"/api/accounts/{account.id}", headers=owner_headers)

        assert response.status_code == 200
        assert [b["date"] for b in response.json()["balances"]] == [
            "2026-03-01",
            "2026-02-01",
            "2026-01-01",
        ]

    def test_get_missing_account(self, client, owner_headers):
        response = client.get("/api/accounts/99999", headers=owner_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Account not found"

    def test_user_without_organization_is_forbidden(self, client, db_session):
        loner = make_user(db_session, "loner@acme.io")

        response = client.get("/api/accounts", headers=headers_for(loner))

        assert response.status_code == 403
        assert response.json()["detail"] == "No organization membership"


class TestAccountUpdate:
    """Tests for updating accounts"""

    def test_update_account_name(self, client, db_session, member_headers, alice, org_a):
        account = make_account(db_session, org_a, alice)

        response = client.patch(
            f"/api/accounts/{account.id}", headers=member_headers, json={"name": "Renamed"}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["type"] == "CHECKING"

    def test_viewer_cannot_update(self, client, db_session, viewer_headers, alice, org_a):
        account = make_account(db_session, org_a, alice)

        response = client.patch(f"/api/accounts/{account.id}", headers=viewer_headers, json={"name": "X"})

        assert response.status_code == 403
        assert response.json()["action"] == "edit"

    def test_deactivate_and_reactivate(self, client, db_session, owner_headers, alice, org_a):
        account = make_account(db_session, org_a, alice)

        response = client.patch(f"/api/accounts/{account.id}", headers=owner_headers, json={"is_active": False})
        assert response.status_code == 200
        assert client.get("/api/accounts", headers=owner_headers).json()["total"] == 0

        response = client.patch(f"/api/accounts/{account.id}", headers=owner_headers, json={"is_active": True})
        assert response.status_code == 200
        assert client.get("/api/accounts", headers=owner_headers).json()["total"] == 1

    def test_explicit_null_name_is_ignored(self, client, db_session, owner_headers, alice, org_a):
        account = make_account(db_session, org_a, alice, name="Keep")

        response = client.patch(
            f"/api/accounts/{account.id}", headers=owner_headers, json={"name": None, "institution": None}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Keep"

    def test_cannot_update_soft_deleted_account(self, client, db_session, owner_headers, alice, org_a):
        account = make_account(db_session, org_a, alice)
        client.delete(f"/api/accounts/{account.id}", headers=owner_headers)

        response = client.patch(f"/api/accounts/{account.id}", headers=owner_headers, json={"name": "Zombie"})

        assert response.status_code == 404


class TestAccountDeletion:
    """Soft delete by default, hard delete on request"""

    def test_member_cannot_delete(self, client, db_session, member_headers, alice, org_a):
        account = make_account(db_session, org_a, alice)

        response = client.delete(f"/api/accounts/{account.id}", headers=member_headers)

        assert response.status_code == 403
        assert response.json()["required_role"] == "ADMIN"

    def test_soft_delete_hides_account_but_keeps_history(
        self, client, db_session, admin_headers, owner_headers, alice, org_a
    ):
        account = make_account(db_session, org_a, alice)
        client.post(
            "/api/balances",
            headers=owner_headers,
            json={"account_id": account.id, "amount": 500, "date": "2026-01-31"},
        )

        response = client.delete(f"/api/accounts/{account.id}", headers=admin_headers)
        assert response.status_code == 204

        assert client.get("/api/accounts", headers=owner_headers).json()["total"] == 0
        assert client.get(f"/api/accounts/{account.id}", headers=owner_headers).status_code == 404

        response = client.get(f"/api/accounts/{account.id}?include_inactive=true", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["is_active"] is False
        assert response.json()["deleted_at"] is not None
        assert len(response.json()["balances"]) == 1

        listed = client.get("/api/accounts?include_inactive=true", headers=owner_headers).json()
        assert listed["total"] == 1

        db_session.expire_all()
        stored = db_session.get(Account, account.id)
        assert stored.deleted_by is not None
        assert db_session.query(Balance).filter_by(account_id=account.id).count() == 1

    def test_soft_delete_twice_is_not_found(self, client, db_session, owner_headers, alice, org_a):
        account = make_account(db_session, org_a, alice)

        assert client.delete(f"/api/accounts/{account.id}", headers=owner_headers).status_code == 204
        assert client.delete(f"/api/accounts/{account.id}", headers=owner_headers).status_code == 404

    def test_hard_delete_removes_account_and_balances(
        self, client, db_session, owner_headers, alice, org_a
    ):
        account = make_account(db_session, org_a, alice)
        account_id = account.id
        client.post(
            "/api/balances",
            headers=owner_headers,
            json={"account_id": account_id, "amount": 500, "date": "2026-01-31"},
        )

        response = client.delete(f"/api/accounts/{account_id}?hard=true", headers=owner_headers)

        assert response.status_code == 204
        db_session.expire_all()
        assert db_session.get(Account, account_id) is None
        assert db_session.query(Balance).filter_by(account_id=account_id).count() == 0

    def test_hard_delete_purges_soft_deleted_account(self, client, db_session, owner_headers, alice, org_a):
        account = make_account(db_session, org_a, alice)
        account_id = account.id
        client.delete(f"/api/accounts/{account_id}", headers=owner_headers)

        response = client.delete(f"/api/accounts/{account_id}?hard=true", headers=owner_headers)

        assert response.status_code == 204
        db_session.expire_all()
        assert db_session.get(Account, account_id) is None

    def test_owner_can_delete(self, client, db_session, owner_headers, alice, org_a):
        account = make_account(db_session, org_a, alice)

        response = client.delete(f"/api/accounts/{account.id}", headers=owner_headers)

        assert response.status_code == 204
