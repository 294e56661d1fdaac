def game_payload(alice, bob, home_score, away_score, **overrides):
    payload = {
        "home_user_id": alice.id,
        "away_user_id": bob.id,
        "home_team": "Arsenal",
        "away_team": "Liverpool",
        "home_score": home_score,
        "away_score": away_score,
        "home_xg": 1.4,
        "away_xg": 0.9,
        "home_stats": {"goals": home_score},
        "away_stats": {"goals": away_score},
    }
    payload.update(overrides)
    return payload


class TestPlayers:
    def test_create_and_list(self, client):
        response = client.post("/api/players", json={"name": "  carol "})
        assert response.status_code == 201
        assert response.get_json()["name"] == "carol"
        assert response.get_json()["prize_money"] == 0

        names = [p["name"] for p in client.get("/api/players").get_json()]
        assert names == ["carol"]

    def test_duplicate_name(self, client, players):
        response = client.post("/api/players", json={"name": "alice"})
        assert response.status_code == 409

    def test_invalid_name(self, client):
        response = client.post("/api/players", json={"name": "<b>"})
        assert response.status_code == 400
        assert "name" in response.get_json()["fields"]

    def test_career_stats(self, client, league, players):
        alice, bob = players
        client.post(
            f"/api/leagues/{league.id}/games",
            json=game_payload(alice, bob, 3, 0, home_stats={"goals": 3, "hat_tricks": 1}),
        )
        data = client.get(f"/api/players/{alice.id}/stats").get_json()
        assert data["player"]["prize_money"] == 7
        assert data["career"]["wins"] == 1
        assert data["career"]["hat_tricks"] == 1
        assert data["career"]["win_bonus"] == 2

    def test_unknown_player_stats(self, client):
        assert client.get("/api/players/99/stats").status_code == 404


class TestLeagues:
    def test_create_league(self, client, players):
        alice, bob = players
        response = client.post(
            "/api/leagues",
            json={"player_a_id": alice.id, "player_b_id": bob.id, "football_league": "Serie A"},
        )
        assert response.status_code == 201
        data = response.get_json()
        assert data["name"] == "1 - Serie A"
        assert data["total_games"] == 10
        assert [row["points"] for row in data["standings"]] == [0, 0]

    def test_create_league_against_yourself(self, client, players):
        alice, _ = players
        response = client.post(
            "/api/leagues",
            json={"player_a_id": alice.id, "player_b_id": alice.id, "football_league": "Serie A"},
        )
        assert response.status_code == 400
        assert "player_b_id" in response.get_json()["fields"]

    def test_total_games_must_be_positive(self, client, players):
        alice, bob = players
        response = client.post(
            "/api/leagues",
            json={
                "player_a_id": alice.id,
                "player_b_id": bob.id,
                "football_league": "Serie A",
                "total_games": 0,
            },
        )
        assert response.status_code == 400
        assert "total_games" in response.get_json()["fields"]

    def test_unknown_player(self, client, players):
        alice, _ = players
        response = client.post(
            "/api/leagues",
            json={"player_a_id": alice.id, "player_b_id": 404, "football_league": "Serie A"},
        )
        assert response.status_code == 404

    def test_list_filters_by_status(self, client, league):
        assert len(client.get("/api/leagues?status=active").get_json()) == 1
        assert client.get("/api/leagues?status=finished").get_json() == []

    def test_detail(self, client, league, players):
        alice, bob = players
        client.post(f"/api/leagues/{league.id}/games", json=game_payload(alice, bob, 2, 1))
        data = client.get(f"/api/leagues/{league.id}").get_json()
        assert data["games_played"] == 1
        assert len(data["games"]) == 1
        assert data["standings"][0]["user_id"] == alice.id
        assert data["standings"][0]["x_pts"] == 3

    def test_unknown_league(self, client):
        assert client.get("/api/leagues/5").status_code == 404


class TestGames:
    def test_record_game_updates_standings_and_money(self, client, league, players):
        alice, bob = players
        response = client.post(
            f"/api/leagues/{league.id}/games",
            json=game_payload(alice, bob, 1, 0, home_team="Sheffield United"),
        )
        assert response.status_code == 201
        game = response.get_json()["game"]
        assert (game["home_prize_money"], game["away_prize_money"]) == (6, -3)

        standings = client.get(f"/api/leagues/{league.id}/standings").get_json()
        assert standings["status"] == "active"
        assert standings["remaining_games"] == 9
        assert standings["standings"][0]["points"] == 3

        money = client.get(f"/api/leagues/{league.id}/prize-money").get_json()
        assert money["leader"]["leader_id"] == alice.id
        assert money["leader"]["amount"] == 6

    def test_negative_counts_rejected(self, client, league, players):
        alice, bob = players
        response = client.post(
            f"/api/leagues/{league.id}/games",
            json=game_payload(alice, bob, -1, 0, home_stats={"red_cards": -2}),
        )
        assert response.status_code == 400
        fields = response.get_json()["fields"]
        assert "home_score" in fields
        assert "red_cards" in fields["home_stats"]

    def test_missing_score_rejected(self, client, league, players):
        alice, bob = players
        payload = game_payload(alice, bob, 1, 0)
        del payload["away_score"]
        response = client.post(f"/api/leagues/{league.id}/games", json=payload)
        assert response.status_code == 400
        assert "away_score" in response.get_json()["fields"]

    def test_outsider_rejected(self, client, league, players):
        alice, _ = players
        carol = client.post("/api/players", json={"name": "carol"}).get_json()
        payload = game_payload(alice, alice, 1, 0, away_user_id=carol["id"])
        response = client.post(f"/api/leagues/{league.id}/games", json=payload)
        assert response.status_code == 400

    def test_edit_and_delete(self, client, league, players):
        alice, bob = players
        game = client.post(
            f"/api/leagues/{league.id}/games", json=game_payload(alice, bob, 3, 0)
        ).get_json()["game"]

        response = client.put(f"/api/games/{game['id']}", json=game_payload(alice, bob, 1, 1))
        assert response.status_code == 200
        assert response.get_json()["game"]["home_prize_money"] == 0

        response = client.delete(f"/api/games/{game['id']}")
        assert response.status_code == 200
        assert client.get(f"/api/games/{game['id']}").status_code == 404

        balances = {p["name"]: p["prize_money"] for p in client.get("/api/players").get_json()}
        assert balances == {"alice": 0, "bob": 0}

    def test_finished_league_returns_conflict(self, client, players):
        alice, bob = players
        league = client.post(
            "/api/leagues",
            json={
                "player_a_id": alice.id,
                "player_b_id": bob.id,
                "football_league": "Ligue 1",
                "total_games": 1,
            },
        ).get_json()
        first = client.post(
            f"/api/leagues/{league['id']}/games", json=game_payload(alice, bob, 2, 0)
        ).get_json()
        assert first["league"]["status"] == "finished"
        assert first["league"]["champion_id"] == alice.id

        response = client.post(
            f"/api/leagues/{league['id']}/games", json=game_payload(alice, bob, 0, 2)
        )
        assert response.status_code == 409

        response = client.delete(f"/api/games/{first['game']['id']}")
        assert response.status_code == 409

    def test_delete_unknown_game(self, client, app):
        assert client.delete("/api/games/31").status_code == 404
