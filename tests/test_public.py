class TestPublicForm:
    def test_renders_defaults(self, client, signup_form):
        signup_form["fields"].append(
            {"id": "4", "type": "range", "label": "Excitement", "minValue": 0, "maxValue": 9}
        )
        form = client.post("/api/forms", json=signup_form).json()
        resp = client.get(f"/f/{form['public_id']}")
        assert resp.status_code == 200
        assert 'id="field-4"' in resp.text
        assert 'value="4"' in resp.text
        assert 'data-selection-limit="1"' in resp.text

    def test_unknown_form(self, client):
        assert client.get("/f/missing").status_code == 404

    def test_archived_form_is_hidden(self, client, published_form):
        client.put(f"/api/forms/{published_form['id']}", json={"status": "archived"})
        assert client.get(f"/f/{published_form['public_id']}").status_code == 404

    def test_draft_form_shows_banner(self, client, signup_form):
        form = client.post("/api/forms", json={**signup_form, "status": "draft"}).json()
        resp = client.get(f"/f/{form['public_id']}")
        assert "This form is not currently accepting responses" in resp.text


class TestPublicSubmit:
    def test_errors_rerender_with_input(self, client, published_form):
        resp = client.post(
            f"/f/{published_form['public_id']}",
            data={"1": "", "2": ["A", "B"], "comments": "keep me"},
        )
        assert resp.status_code == 400
        assert "Name is required" in resp.text
        assert "You can select at most 1 option(s)" in resp.text
        assert "keep me" in resp.text

    def test_success(self, client, published_form):
        resp = client.post(
            f"/f/{published_form['public_id']}",
            data={"1": "Ada", "2": "A", "3": "true", "rating": "4"},
        )
        assert resp.status_code == 200
        assert "Thank you!" in resp.text

        [item] = client.get(f"/api/forms/{published_form['id']}/responses").json()
        assert item["values"] == {"1": "Ada", "2": '["A"]', "3": "Yes"}
        assert item["rating"] == 4
