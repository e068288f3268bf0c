"""Test product, market, agent and health endpoints."""


class TestHealthEndpoint:
    def test_health_reports_database(self, api) -> None:
        response = api.client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["database"]["connected"] is True
        assert "timestamp" in data


class TestProducts:
    def test_list_is_public(self, api) -> None:
        response = api.client.get("/products/")

        assert response.status_code == 200
        [product] = response.json()
        assert product["name"] == "Tomate"
        assert product["unitsAllowed"] == ["kg", "basket"]

    def test_create_requires_auth(self, api) -> None:
        response = api.client.post("/products/", json={"name": "Riz", "unitsAllowed": ["kg"]})

        assert response.status_code == 401

    def test_create(self, api) -> None:
        response = api.client.post(
            "/products/",
            json={"name": "Riz", "category": "Céréales", "unitsAllowed": ["kg"]},
            headers=api.agent_headers,
        )

        assert response.status_code == 201
        assert response.json()["name"] == "Riz"
        assert response.json()["unitsAllowed"] == ["kg"]

    def test_create_needs_at_least_one_unit(self, api) -> None:
        response = api.client.post(
            "/products/",
            json={"name": "Riz", "unitsAllowed": []},
            headers=api.agent_headers,
        )

        assert response.status_code == 400


class TestMarkets:
    def test_list_filters_by_city(self, api) -> None:
        assert len(api.client.get("/markets/").json()) == 2
        assert api.client.get("/markets/?city=Porto-Novo").json() == []

    def test_create(self, api) -> None:
        response = api.client.post(
            "/markets/",
            json={"name": "Marché Ouando", "city": "Porto-Novo", "lat": 6.4969, "lon": 2.6289},
            headers=api.agent_headers,
        )

        assert response.status_code == 201
        assert response.json()["city"] == "Porto-Novo"
        assert [m["name"] for m in api.client.get("/markets/?city=Porto-Novo").json()] == ["Marché Ouando"]

    def test_create_rejects_bad_coordinates(self, api) -> None:
        response = api.client.post(
            "/markets/",
            json={"name": "Nulle part", "city": "Cotonou", "lat": 95, "lon": 2.4},
            headers=api.agent_headers,
        )

        assert response.status_code == 400


class TestAgents:
    def test_admin_only(self, api) -> None:
        assert api.client.get("/agents/", headers=api.agent_headers).status_code == 403

    def test_list(self, api) -> None:
        response = api.client.get("/agents/", headers=api.admin_headers)

        assert response.status_code == 200
        assert {a["role"] for a in response.json()} == {"AGENT", "ADMIN"}

    def test_create_and_duplicate_phone(self, api) -> None:
        agent = {"name": "Jean Dupont", "phone": "+22997123456"}

        created = api.client.post("/agents/", json=agent, headers=api.admin_headers)
        duplicate = api.client.post("/agents/", json=agent, headers=api.admin_headers)

        assert created.status_code == 201
        assert created.json()["role"] == "AGENT"
        assert duplicate.status_code == 409
