"""
Local smoke script — run this WITHOUT credentials or network.
Walks every layer once: config → form encoder → dispatch table
→ sync client (fake transport) → async client (mock transport) → availability report.

Usage:
    python3 smoke_local.py
"""
import sys
import asyncio

# ── ANSI colours ─────────────────────────────────────────────────────────────
GREEN  = "\033[92m"
RED    = "\033[91m"
YELLOW = "\033[93m"
CYAN   = "\033[96m"
BOLD   = "\033[1m"
RESET  = "\033[0m"

passed = 0
failed = 0


def ok(label: str, detail: str = ""):
    global passed
    passed += 1
    suffix = f"  {YELLOW}{detail}{RESET}" if detail else ""
    print(f"  {GREEN}✓{RESET}  {label}{suffix}")


def fail(label: str, err: str = ""):
    global failed
    failed += 1
    print(f"  {RED}✗{RESET}  {label}")
    if err:
        print(f"       {RED}{err}{RESET}")


def section(title: str):
    print(f"\n{BOLD}{CYAN}{'─'*60}{RESET}")
    print(f"{BOLD}{CYAN}  {title}{RESET}")
    print(f"{BOLD}{CYAN}{'─'*60}{RESET}")


class _RecordingTransport:
    """Stands in for FormTransport: remembers each post, answers {"ok": true}."""

    def __init__(self):
        self.calls = []

    def post(self, path, form):
        self.calls.append((path, form))
        return {"ok": True}

    def close(self):
        pass


# ══════════════════════════════════════════════════════════════════════════════
# 1. Config
# ══════════════════════════════════════════════════════════════════════════════
section("1. Config")
try:
    from config import get_settings
    from astroclient.services.auth import ClientConfig

    s = get_settings()
    cfg = ClientConfig.from_settings(s)
    ok("Settings loaded", f"base_url={cfg.base_url}")
    ok("Timeout", f"{cfg.timeout}s")
    if cfg.has_credentials:
        ok("Credentials", f"user id: {cfg.user_id}")
    else:
        ok("Credentials", "not set (fine for this script)")
except Exception as e:
    fail("Config", str(e))


# ══════════════════════════════════════════════════════════════════════════════
# 2. Form encoder — three formats
# ══════════════════════════════════════════════════════════════════════════════
section("2. Form encoder — single / composite / hybrid")
try:
    from astroclient.models.birth_data import (
        BirthData, PrimaryBirthData, SecondaryBirthData, TwoPersonBirthData,
    )
    from astroclient.services.form_encoder import (
        FormFormat, encode, format_number,
    )

    BIRTH = BirthData(day=10, month=5, year=1990, hour=19, min=55, lat=19.20, lon=25.20, tzone=5.5)
    PAIR = TwoPersonBirthData(
        primary=PrimaryBirthData(day=10, month=5, year=1990, hour=11, min=55, lat=19.20, lon=25.20, tzone=5.5),
        secondary=SecondaryBirthData(day=10, month=5, year=1990, hour=15, min=22, lat=19.33, lon=25.20, tzone=5.5),
        orb=1,
    )

    for value, expected in [(19.20, "19.2"), (1.0, "1"), (5.5, "5.5"), (-5, "-5")]:
        got = format_number(value)
        assert got == expected, f"{value!r} → {got!r}"
    ok("format_number", "19.20→19.2  1.0→1  5.5→5.5  -5→-5")

    single = encode(FormFormat.SINGLE, BIRTH)
    assert len(single) == 8 and single["lat"] == "19.2"
    ok("single", f"{len(single)} keys")

    composite = encode(FormFormat.COMPOSITE, PAIR)
    assert composite["p_hour"] == "11" and composite["s_lat"] == "19.33" and composite["orb"] == "1"
    ok("composite", f"{len(composite)} keys, p_/s_ prefixed")

    hybrid = encode(FormFormat.HYBRID, PAIR)
    assert hybrid["hour"] == "11" and hybrid["s_hour"] == "15"
    assert not any(k.startswith("p_") for k in hybrid), "hybrid leaked p_ keys"
    ok("hybrid", f"{len(hybrid)} keys, primary unprefixed")

except Exception as e:
    fail("Form encoder", str(e))
    import traceback; traceback.print_exc()


# ══════════════════════════════════════════════════════════════════════════════
# 3. Dispatch table
# ══════════════════════════════════════════════════════════════════════════════
section("3. Dispatch table — paths and format selection")
try:
    from astroclient.errors import InputValidationError
    from astroclient.services.endpoints import HYBRID_OPERATIONS, OPERATIONS, prepare

    ok("Operations", f"{len(OPERATIONS)} registered, {len(HYBRID_OPERATIONS)} hybrid")

    request = prepare("general_sign_report", PAIR, path_params={"sign": "sun"})
    assert request.path == "general_sign_report/tropical/sun", request.path
    ok("general_sign_report", request.path)

    request = prepare("synastry_horoscope", PAIR)
    assert "p_day" in request.form
    ok("synastry_horoscope", "composite body")

    try:
        prepare("personalized_planet_prediction", BIRTH, path_params={"planet": " "})
        fail("Blank planet", "accepted")
    except InputValidationError as e:
        ok("Blank planet rejected", str(e))

except Exception as e:
    fail("Dispatch table", str(e))
    import traceback; traceback.print_exc()


# ══════════════════════════════════════════════════════════════════════════════
# 4. Sync client
# ══════════════════════════════════════════════════════════════════════════════
section("4. Sync client — fake transport")
try:
    from astroclient.services.astrology_api import AstrologyAPI

    offline = ClientConfig(user_id="000000", api_key="offline-key")
    transport = _RecordingTransport()
    with AstrologyAPI(offline, transport=transport) as api:
        api.western_horoscope(BIRTH)
        api.general_house_report(PAIR)
        api.compatibility("leo", "aries", "cancer", "virgo", PAIR)

    paths = [path for path, _ in transport.calls]
    assert paths == [
        "western_horoscope",
        "general_house_report/tropical",
        "compatibility/leo/aries/cancer/virgo",
    ], paths
    for path in paths:
        ok("POST", path)

except Exception as e:
    fail("Sync client", str(e))
    import traceback; traceback.print_exc()


# ══════════════════════════════════════════════════════════════════════════════
# 5. Async client + availability report
# ══════════════════════════════════════════════════════════════════════════════
section("5. Async client — mock transport + availability report")
try:
    import httpx
    from astroclient.services.astrology_api import AsyncAstrologyAPI
    from astroclient.services.availability import probe_availability, render_markdown
    from astroclient.services.transport import AsyncFormTransport

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("western_horoscope"):
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(405, json={"status": False, "msg": "not in plan"})

    async def _probe():
        mock = AsyncFormTransport(offline, transport=httpx.MockTransport(handler))
        async with AsyncAstrologyAPI(offline, transport=mock) as api:
            return await probe_availability(api)

    report = asyncio.run(_probe())
    ok("Probe finished", f"{len(report.accessible)} accessible, {len(report.not_accessible)} not accessible")
    assert {r.outcome for r in report.not_accessible} == {"license"}
    ok("405 classified as license")

    markdown = render_markdown(report)
    assert "### Detailed 405 Error Responses" in markdown
    ok("Markdown rendered", f"{len(markdown.splitlines())} lines")

except Exception as e:
    fail("Async client", str(e))
    import traceback; traceback.print_exc()


# ══════════════════════════════════════════════════════════════════════════════
# Summary
# ══════════════════════════════════════════════════════════════════════════════
total = passed + failed
print(f"\n{BOLD}{'═'*60}{RESET}")
print(f"{BOLD}  Results:  {GREEN}{passed} passed{RESET}  {RED}{failed} failed{RESET}  of {total} checks{RESET}")
print(f"{BOLD}{'═'*60}{RESET}\n")

if failed > 0:
    sys.exit(1)
