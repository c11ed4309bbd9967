"""Tests for the HTTP routes, with Supabase and the advisor mocked out."""

from datetime import date
from unittest.mock import patch

from wellness_journal.journal import drafts
from wellness_journal.journal.dashboard import NO_RECORDS_REPORT

SB = "wellness_journal.services.supabase"
ROUTES = "wellness_journal.api.routes"

USER_ID = "user-1"


def test_healthcheck(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"running" in resp.data


def test_requires_token(client):
    resp = client.get("/api/record")
    assert resp.status_code == 401
    assert resp.get_json()["ok"] is False


def test_rejects_invalid_token(client, auth_headers):
    with patch(f"{SB}.get_user", return_value=(None, "Invalid session")):
        resp = client.get("/api/record", headers=auth_headers)
    assert resp.status_code == 401


def test_login(client):
    session = {"access_token": "a", "refresh_token": "r", "user_id": USER_ID}
    with patch(f"{SB}.sign_in", return_value=(session, None)) as sign_in:
        resp = client.post("/api/auth/login", json={"email": "a@b.c", "password": "secret1"})

    assert resp.status_code == 200
    assert resp.get_json()["access_token"] == "a"
    sign_in.assert_called_once_with("a@b.c", "secret1")


def test_login_failure(client):
    with patch(f"{SB}.sign_in", return_value=(None, "Invalid login credentials")):
        resp = client.post("/api/auth/login", json={"email": "a@b.c", "password": "x"})

    assert resp.status_code == 401
    assert "Invalid login credentials" in resp.get_json()["error"]


def test_login_requires_fields(client):
    resp = client.post("/api/auth/login", json={"email": ""})
    assert resp.status_code == 400


def test_signup(client):
    with patch(f"{SB}.sign_up", return_value=({"user_id": USER_ID}, None)):
        resp = client.post("/api/auth/signup", json={"email": "a@b.c", "password": "secret1"})

    assert resp.status_code == 200
    assert resp.get_json()["message"] == "確認メールを送信しました。"


def test_get_record_restores_log(client, auth_headers, signed_in):
    log = {
        "date": "2024-02-10",
        "memo": "眠い\n【飲酒理由】習慣",
        "alcohol_amount": 500,
        "alcohol_type": "ビール (350ml)x1",
    }
    with patch(f"{SB}.fetch_settings", return_value=({"mode_alcohol": True}, None)), \
            patch(f"{SB}.fetch_log_for_date", return_value=(log, None)) as fetch:
        resp = client.get("/api/record?date=2024-02-10", headers=auth_headers)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["modes"]["mode_alcohol"] is True
    assert body["form"]["memo"] == "眠い"
    assert [d["label"] for d in body["form"]["drinks"]] == ["ビール (350ml)", "その他 (150ml)"]
    assert body["total_pure_alcohol"] == 14.0
    assert len(body["drink_presets"]) == 6
    assert fetch.call_args.args[1:] == (USER_ID, "2024-02-10")
    assert len(drafts.get_drinks(USER_ID)) == 2


def test_get_record_defaults_to_today(client, auth_headers, signed_in):
    with patch(f"{SB}.fetch_settings", return_value=(None, None)), \
            patch(f"{SB}.fetch_log_for_date", return_value=(None, None)), \
            patch(f"{ROUTES}.today_iso", return_value="2024-03-01"):
        resp = client.get("/api/record", headers=auth_headers)

    form = resp.get_json()["form"]
    assert form["date"] == "2024-03-01"
    assert form["general_mood"] == 3


def test_get_record_bad_date(client, auth_headers, signed_in):
    resp = client.get("/api/record?date=tomorrow", headers=auth_headers)
    assert resp.status_code == 400


def test_drink_draft_endpoints(client, auth_headers, signed_in):
    resp = client.post("/api/record/drinks", json={"key": "beer350", "count": 2}, headers=auth_headers)
    body = resp.get_json()
    assert body["total_pure_alcohol"] == 28.0
    drink_id = body["drinks"][0]["id"]

    resp = client.post("/api/record/drinks", json={"key": "absinthe"}, headers=auth_headers)
    assert resp.status_code == 400

    resp = client.post("/api/record/drinks", json={"key": "wine", "count": 0}, headers=auth_headers)
    assert resp.status_code == 400

    resp = client.delete(f"/api/record/drinks/{drink_id}", headers=auth_headers)
    assert resp.get_json()["drinks"] == []


def test_submit_record_uses_draft(client, auth_headers, signed_in):
    drafts.add_drink(USER_ID, "highball", 1)
    saved_row = {"id": 42, "date": "2024-02-10"}

    with patch(f"{SB}.fetch_settings", return_value=({"mode_alcohol": True}, None)), \
            patch(f"{ROUTES}.advisor.daily_advice", return_value="ほどほどにね") as advice, \
            patch(f"{SB}.upsert_log", return_value=([saved_row], None)) as upsert:
        resp = client.post(
            "/api/record",
            json={"date": "2024-02-10", "general_mood": 4, "memo": "疲れた"},
            headers=auth_headers,
        )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body == {"ok": True, "advice": "ほどほどにね", "log": saved_row}

    assert advice.call_args.args[0]["alcohol_amount"] == 350
    payload = upsert.call_args.args[1]
    assert payload["user_id"] == USER_ID
    assert payload["alcohol_type"] == "ハイボール (350ml)x1"
    assert payload["memo"] == "疲れた\n【飲酒理由】習慣"
    assert payload["ai_comment"] == "ほどほどにね"
    assert drafts.get_drinks(USER_ID) == []


def test_submit_record_backend_error_keeps_draft(client, auth_headers, signed_in):
    drafts.add_drink(USER_ID, "sake", 1)

    with patch(f"{SB}.fetch_settings", return_value=(None, None)), \
            patch(f"{ROUTES}.advisor.daily_advice", return_value="x"), \
            patch(f"{SB}.upsert_log", return_value=(None, "connection refused")):
        resp = client.post("/api/record", json={"date": "2024-02-10"}, headers=auth_headers)

    assert resp.status_code == 502
    assert "保存エラー" in resp.get_json()["error"]
    assert len(drafts.get_drinks(USER_ID)) == 1


def test_submit_record_invalid(client, auth_headers, signed_in):
    with patch(f"{SB}.upsert_log") as upsert:
        resp = client.post(
            "/api/record",
            json={"date": "2024-02-10", "general_mood": 11},
            headers=auth_headers,
        )

    assert resp.status_code == 400
    upsert.assert_not_called()


def test_advice_endpoint(client, auth_headers, signed_in):
    with patch(f"{ROUTES}.advisor.daily_advice", return_value="えらい！"):
        resp = client.post("/api/advice", json={"mode": "daily"}, headers=auth_headers)
    assert resp.get_json() == {"advice": "えらい！"}


def test_report_empty_period(client, auth_headers, signed_in):
    with patch(f"{SB}.fetch_logs_between", return_value=([], None)), \
            patch(f"{ROUTES}.advisor.period_report") as report:
        resp = client.post("/api/report", json={"period": 7}, headers=auth_headers)

    assert resp.get_json()["report"] == NO_RECORDS_REPORT
    report.assert_not_called()


def test_report(client, auth_headers, signed_in):
    logs = [{"date": "2024-02-10", "general_mood": 2}]
    with patch(f"{SB}.fetch_logs_between", return_value=(logs, None)) as fetch, \
            patch(f"{ROUTES}.today", return_value=date(2024, 2, 12)), \
            patch(f"{ROUTES}.advisor.period_report", return_value="まあまあね") as report:
        resp = client.post("/api/report", json={"period": 30}, headers=auth_headers)

    assert resp.get_json()["report"] == "まあまあね"
    assert fetch.call_args.args[1:] == (USER_ID, "2024-01-13", "2024-02-12")
    report.assert_called_once_with(logs, 30)


def test_report_bad_period(client, auth_headers, signed_in):
    resp = client.post("/api/report", json={"period": 14}, headers=auth_headers)
    assert resp.status_code == 400


def test_dashboard(client, auth_headers, signed_in):
    logs = [{"date": "2024-02-10", "general_mood": 4, "stress_level": 3}]
    with patch(f"{SB}.fetch_logs_between", return_value=(logs, None)), \
            patch(f"{ROUTES}.today", return_value=date(2024, 2, 12)):
        resp = client.get("/api/dashboard?period=7", headers=auth_headers)

    body = resp.get_json()
    assert body["start"] == "2024-02-05"
    assert body["end"] == "2024-02-12"
    assert body["series"] == [
        {"date": "02-10", "full_date": "2024-02-10", "mood": 4, "pain": None, "stress": 3}
    ]


def test_dashboard_bad_period(client, auth_headers, signed_in):
    resp = client.get("/api/dashboard?period=14", headers=auth_headers)
    assert resp.status_code == 400


def test_dashboard_backend_error(client, auth_headers, signed_in):
    with patch(f"{SB}.fetch_logs_between", return_value=(None, "timeout")):
        resp = client.get("/api/dashboard", headers=auth_headers)
    assert resp.status_code == 502


def test_calendar(client, auth_headers, signed_in):
    logs = [{"id": 3, "date": "2024-02-10", "score": 9}]
    with patch(f"{SB}.fetch_logs_between", return_value=(logs, None)) as fetch, \
            patch(f"{ROUTES}.today", return_value=date(2024, 2, 12)):
        resp = client.get("/api/calendar?month=2024-02", headers=auth_headers)

    body = resp.get_json()
    assert body["title"] == "2024.02"
    assert fetch.call_args.args[2:] == ("2024-01-28", "2024-03-02")
    cell = next(c for c in body["days"] if c["date"] == "2024-02-10")
    assert cell["log_id"] == 3
    assert cell["tone"] == "good"


def test_calendar_bad_month(client, auth_headers, signed_in):
    resp = client.get("/api/calendar?month=soon", headers=auth_headers)
    assert resp.status_code == 400


def test_calendar_day(client, auth_headers, signed_in):
    log = {"id": 3, "date": "2024-02-10", "score": 3, "sleep_start": "23:00", "sleep_end": "06:30"}
    with patch(f"{SB}.fetch_log_by_id", return_value=(log, None)):
        resp = client.get("/api/calendar/3", headers=auth_headers)

    body = resp.get_json()
    assert body["label"] == "2月10日 (土)"
    assert body["sleep"] == "7.5h"
    assert body["tone"] == "bad"


def test_calendar_day_missing(client, auth_headers, signed_in):
    with patch(f"{SB}.fetch_log_by_id", return_value=(None, None)):
        resp = client.get("/api/calendar/99", headers=auth_headers)
    assert resp.status_code == 404


def test_create_entry(client, auth_headers, signed_in):
    with patch(f"{SB}.insert_entry", return_value=([{"id": 5}], None)) as insert, \
            patch(f"{ROUTES}.today_iso", return_value="2024-02-10"):
        resp = client.post("/api/entries", json={"score": 8, "meals": "うどん"}, headers=auth_headers)

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["entry"] == {"id": 5}
    assert body["sleep_hours"] == 8.0
    payload = insert.call_args.args[1]
    assert payload["date"] == "2024-02-10"
    assert payload["user_id"] == USER_ID


def test_create_entry_invalid(client, auth_headers, signed_in):
    resp = client.post("/api/entries", json={"score": 20}, headers=auth_headers)
    assert resp.status_code == 400


def test_delete_entry(client, auth_headers, signed_in):
    with patch(f"{SB}.delete_log", return_value=([{"id": 5}], None)) as delete:
        resp = client.delete("/api/entries/5", headers=auth_headers)

    assert resp.status_code == 200
    assert delete.call_args.args[1:] == (USER_ID, "5")


def test_delete_entry_missing(client, auth_headers, signed_in):
    with patch(f"{SB}.delete_log", return_value=([], None)):
        resp = client.delete("/api/entries/5", headers=auth_headers)
    assert resp.status_code == 404


def test_delete_entry_error(client, auth_headers, signed_in):
    with patch(f"{SB}.delete_log", return_value=(None, "denied")):
        resp = client.delete("/api/entries/5", headers=auth_headers)
    assert resp.status_code == 502
    assert resp.get_json()["error"] == "削除に失敗しました"


def test_submit_record_impossible_date(client, auth_headers, signed_in):
    with patch(f"{ROUTES}.advisor.daily_advice") as advice, \
            patch(f"{SB}.upsert_log") as upsert:
        resp = client.post(
            "/api/record",
            json={"date": "2024-13-45", "drinks": []},
            headers=auth_headers,
        )

    assert resp.status_code == 400
    advice.assert_not_called()
    upsert.assert_not_called()


def test_submit_record_infinite_spending(client, auth_headers, signed_in):
    with patch(f"{SB}.fetch_settings", return_value=({"mode_mental": True, "mode_diet": True}, None)), \
            patch(f"{ROUTES}.advisor.daily_advice", return_value="x"), \
            patch(f"{SB}.upsert_log", return_value=([], None)) as upsert:
        resp = client.post(
            "/api/record",
            json={"date": "2024-05-01", "spending": "inf", "steps": "1e400", "drinks": []},
            headers=auth_headers,
        )

    assert resp.status_code == 200
    payload = upsert.call_args.args[1]
    assert payload["spending"] is None
    assert payload["steps"] is None


def test_create_entry_impossible_time(client, auth_headers, signed_in):
    with patch(f"{SB}.insert_entry") as insert:
        resp = client.post("/api/entries", json={"sleep_start": "25:00"}, headers=auth_headers)

    assert resp.status_code == 400
    insert.assert_not_called()
