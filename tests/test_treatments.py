from tests.conftest import API

whitening = {
    "name": "Whitening",
    "description": "In-office whitening session",
    "price": 120,
    "duration": 60,
}


class TestTreatments:

    def test_public_listing_sorted(self, client, professional, treatment):
        _, headers = professional
        client.post(f"{API}/treatments", json=whitening, headers=headers)
        client.post(f"{API}/treatments", json={**whitening, "name": "Braces"}, headers=headers)

        response = client.get(f"{API}/treatments")
        assert response.status_code == 200
        assert [t["name"] for t in response.json()["data"]] == ["Braces", "Cleaning", "Whitening"]

    def test_get_treatment(self, client, treatment):
        response = client.get(f"{API}/treatments/{treatment['id']}")
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Cleaning"

    def test_get_missing_treatment(self, client):
        assert client.get(f"{API}/treatments/{'q' * 20}").status_code == 404

    def test_create_requires_professional(self, client, patient):
        _, headers = patient
        response = client.post(f"{API}/treatments", json=whitening, headers=headers)
        assert response.status_code == 403

    def test_create_invalid(self, client, professional):
        _, headers = professional
        response = client.post(
            f"{API}/treatments", json={**whitening, "price": 0, "name": "x" * 51}, headers=headers
        )
        assert response.status_code == 400
        assert len(response.json()["errors"]) == 2

    def test_duplicate_name(self, client, professional, treatment):
        _, headers = professional
        response = client.post(f"{API}/treatments", json={**whitening, "name": "Cleaning"}, headers=headers)
        assert response.status_code == 409

    def test_update_treatment(self, client, professional, treatment):
        _, headers = professional

        response = client.put(f"{API}/treatments/{treatment['id']}", json={"price": 55}, headers=headers)
        assert response.status_code == 200
        updated = response.json()["treatment"]
        assert updated["price"] == 55
        assert updated["name"] == "Cleaning"

    def test_update_invalid_merge(self, client, professional, treatment):
        _, headers = professional
        response = client.put(f"{API}/treatments/{treatment['id']}", json={"price": -1}, headers=headers)
        assert response.status_code == 400

    def test_update_name_taken(self, client, professional, treatment):
        _, headers = professional
        client.post(f"{API}/treatments", json=whitening, headers=headers)

        response = client.put(
            f"{API}/treatments/{treatment['id']}", json={"name": "Whitening"}, headers=headers
        )
        assert response.status_code == 409

    def test_delete_treatment(self, client, professional, treatment):
        _, headers = professional

        response = client.delete(f"{API}/treatments/{treatment['id']}", headers=headers)
        assert response.status_code == 200
        assert client.get(f"{API}/treatments/{treatment['id']}").status_code == 404
