# tests/test_services.py
"""End-to-end check pipeline against stubbed network collaborators."""

import json
from datetime import datetime, timedelta, timezone

import httpx

from backend.app.features.ssl_check.models import Grade
from backend.app.features.ssl_check.services import SslCheckService
from conftest import (
    ALL_SECURITY_HEADERS,
    StubInternet,
    certificate_error,
    chat_reply,
    dns_error,
    make_settings,
)


async def _check(stub: StubInternet, domain: str = "example.com", **settings):
    service = SslCheckService(config=make_settings(**settings), transport=stub.transport)
    return await service.check(domain)


async def test_all_headers_and_valid_tls(ai_ok):
    report = await _check(StubInternet(https=ALL_SECURITY_HEADERS, ai=ai_ok))
    payload = report.to_payload()

    assert payload["is_valid"] is True
    assert payload["grade"] == "A+"
    assert payload["vulnerabilities"] is None
    assert payload["recommendations"] == ["Your SSL configuration looks good!"]
    assert payload["issuer"] == "DigiCert"
    assert "domain_exists" not in payload
    assert "error_message" not in payload
    datetime.fromisoformat(payload["expires_at"].replace("Z", "+00:00"))


async def test_missing_headers_are_reported(ai_ok):
    headers = {"Strict-Transport-Security": "max-age=31536000"}
    report = await _check(StubInternet(https=headers, ai=ai_ok))
    assert report.is_valid is True
    assert report.grade == Grade.C  # 100 - 10 - 5 - 10
    assert report.vulnerabilities == [
        "Missing X-Frame-Options header",
        "Missing X-Content-Type-Options header",
        "No Content-Security-Policy header",
    ]
    assert len(report.recommendations) == 3


async def test_xss_weight_from_settings(ai_ok):
    headers = {k: v for k, v in ALL_SECURITY_HEADERS.items() if k != "X-XSS-Protection"}
    report = await _check(
        StubInternet(https=headers, ai=ai_ok), XSS_PROTECTION_WEIGHT=10
    )
    assert report.grade == Grade.A
    assert report.vulnerabilities == ["Missing X-XSS-Protection header"]


async def test_no_dns_record():
    stub = StubInternet(https=dns_error())
    payload = (await _check(stub, "no-such-domain.invalid")).to_payload()

    assert payload["is_valid"] is False
    assert payload["grade"] == "N/A"
    assert payload["domain_exists"] is False
    assert payload["issuer"] is None
    assert payload["expires_at"] is None
    assert payload["vulnerabilities"] == ["Domain does not exist or has no DNS records"]
    assert payload["error_message"] == (
        'Domain "no-such-domain.invalid" could not be found. Please verify the domain name.'
    )
    assert len(stub.requests) == 1


async def test_http_only_domain():
    stub = StubInternet(https=None, http={})
    payload = (await _check(stub)).to_payload()

    assert payload["is_valid"] is False
    assert payload["grade"] == "F"
    assert payload["domain_exists"] is True
    assert payload["vulnerabilities"] == [
        "No valid HTTPS configuration",
        "Site accessible only via HTTP",
    ]
    assert "error_message" not in payload


async def test_certificate_error():
    payload = (await _check(StubInternet(https=certificate_error()))).to_payload()
    assert payload["is_valid"] is False
    assert payload["grade"] == "F"
    assert payload["domain_exists"] is True
    assert payload["vulnerabilities"][0].startswith("SSL/TLS Certificate Error: ")
    assert "CERTIFICATE_VERIFY_FAILED" in payload["vulnerabilities"][0]


async def test_timeout():
    payload = (await _check(StubInternet(https=httpx.ConnectTimeout("timed out")))).to_payload()
    assert payload["is_valid"] is False
    assert payload["grade"] == "N/A"
    assert payload["domain_exists"] is True
    assert payload["error_message"] == 'Connection to "example.com" timed out.'


async def test_unreachable():
    payload = (await _check(StubInternet(https=None, http=None))).to_payload()
    assert payload["is_valid"] is False
    assert payload["grade"] == "N/A"
    assert payload["domain_exists"] is False
    assert payload["vulnerabilities"] == ["Domain unreachable"]


async def test_failure_never_calls_ai(ai_ok):
    stub = StubInternet(https=dns_error(), ai=ai_ok)
    await _check(stub)
    assert all(r.url.host != "ai.test" for r in stub.requests)


async def test_enrichment_failure_does_not_affect_grading():
    headers = {k: v for k, v in ALL_SECURITY_HEADERS.items() if k != "X-Frame-Options"}
    started = datetime.now(timezone.utc)
    stub = StubInternet(https=headers, ai=chat_reply("{not json"))

    report = await _check(stub)

    assert report.is_valid is True
    assert report.grade == Grade.A
    assert report.vulnerabilities == ["Missing X-Frame-Options header"]
    assert report.issuer == "Unknown"
    expected = started + timedelta(days=365)
    assert abs(report.expires_at - expected) < timedelta(minutes=1)


async def test_enrichment_timeout_does_not_affect_grading():
    stub = StubInternet(https=ALL_SECURITY_HEADERS, ai=httpx.ReadTimeout("timed out"))
    report = await _check(stub)
    assert report.is_valid is True
    assert report.grade == Grade.A_PLUS
    assert report.vulnerabilities is None
    assert report.issuer == "Unknown"


async def test_no_api_key_skips_enrichment():
    stub = StubInternet(https=ALL_SECURITY_HEADERS)
    report = await _check(stub, AI_API_KEY=None)
    assert report.issuer == "Unknown"
    assert [r.url.scheme for r in stub.requests] == ["https"]


async def test_ai_reply_parsed_with_months():
    reply = chat_reply(json.dumps({"issuer": "Let's Encrypt", "expires_months": 3}))
    started = datetime.now(timezone.utc)
    report = await _check(StubInternet(https=ALL_SECURITY_HEADERS, ai=reply))
    assert report.issuer == "Let's Encrypt"
    assert abs(report.expires_at - (started + timedelta(days=90))) < timedelta(minutes=1)
