"""
Fleet Reservation command-line client.

Usage:
  fleet login --email alice@corp.com
  fleet vehicles --start 2030-06-01 --end 2030-06-05
  fleet request --vehicle 3 --start 2030-06-01 --end 2030-06-05 --purpose "Site visit"
  fleet requests --mine
  fleet approve 12          (admin)
  fleet stats               (admin)

Every command except login needs a signed-in user; approve, reject and stats
need an admin profile.
"""

import argparse
import asyncio
import getpass
import sys
from typing import Optional
from app.client.api import ApiError, FleetApiClient
from app.client.auth import AuthBridge
from app.client.identity import IdentityProviderClient, IdentityProviderError
from app.client.session_store import SessionStore
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


class AccessDenied(Exception):
    pass


def require_login(auth: AuthBridge):
    if not auth.is_authenticated:
        raise AccessDenied("Not signed in. Run: fleet login --email <you@company.com>")


def require_admin(auth: AuthBridge):
    require_login(auth)
    if not auth.is_admin:
        raise AccessDenied("This command needs an admin account")


def _api_user(auth: AuthBridge, api: FleetApiClient) -> dict:
    user = api.find_user(auth.user.email)
    if not user:
        raise AccessDenied(f"No fleet account registered for {auth.user.email}")
    return user


def _print_vehicle(v: dict):
    print(f"  #{v['id']:<4} {v['name']:<24} {v.get('plateNumber', ''):<12} "
          f"{v.get('make') or ''} {v.get('model') or ''}".rstrip())


def _print_request(r: dict):
    vehicle = (r.get("vehicle") or {}).get("name", f"vehicle {r['vehicleId']}")
    code = f" code={r['accessCode']}" if r.get("accessCode") else ""
    print(f"  #{r['id']:<4} {r['status']:<9} {vehicle:<24} "
          f"{r['startDate']} → {r['endDate']}{code}")


# ── Commands ──────────────────────────────────────────────────────────────────
async def cmd_login(args, auth: AuthBridge, api: FleetApiClient) -> int:
    password = args.password or getpass.getpass("Password: ")
    user = await auth.login(args.email, password)
    if user is None:
        print("⚠️  Signed in, but no profile was found for this account")
        return 1
    print(f"✅ Signed in as {user.name or user.email} ({user.role})")
    return 0


async def cmd_logout(args, auth: AuthBridge, api: FleetApiClient) -> int:
    await auth.logout()
    print("👋 Signed out")
    return 0


async def cmd_whoami(args, auth: AuthBridge, api: FleetApiClient) -> int:
    require_login(auth)
    u = auth.user
    print(f"{u.name or '-'} <{u.email}> role={u.role} department={u.department or '-'}")
    return 0


async def cmd_vehicles(args, auth: AuthBridge, api: FleetApiClient) -> int:
    require_login(auth)
    if args.start or args.end:
        if not (args.start and args.end):
            raise AccessDenied("Give both --start and --end to check availability")
        vehicles = api.available_vehicles(args.start, args.end)
        print(f"🚗 {len(vehicles)} vehicle(s) free {args.start} → {args.end}")
    else:
        vehicles = api.list_vehicles()
        print(f"🚗 {len(vehicles)} vehicle(s) in the fleet")
    for v in vehicles:
        _print_vehicle(v)
    return 0


async def cmd_request(args, auth: AuthBridge, api: FleetApiClient) -> int:
    require_login(auth)
    me = _api_user(auth, api)
    created = api.create_request(args.vehicle, me["id"], args.start, args.end, args.purpose)
    print(f"📝 Request #{created['id']} submitted — status {created['status']}")
    return 0


async def cmd_requests(args, auth: AuthBridge, api: FleetApiClient) -> int:
    require_login(auth)
    user_id = None
    if args.mine or not auth.is_admin:
        user_id = _api_user(auth, api)["id"]
    items = api.list_requests(user_id=user_id, status=args.status)
    print(f"📋 {len(items)} request(s)")
    for r in items:
        _print_request(r)
    return 0


async def _decide(args, auth: AuthBridge, api: FleetApiClient, status: str) -> int:
    require_admin(auth)
    me = _api_user(auth, api)
    updated = api.set_request_status(args.id, status, admin_id=me["id"])
    if status == "approved":
        print(f"✅ Request #{updated['id']} approved — access code {updated['accessCode']}")
    else:
        print(f"❌ Request #{updated['id']} rejected")
    return 0


async def cmd_approve(args, auth: AuthBridge, api: FleetApiClient) -> int:
    return await _decide(args, auth, api, "approved")


async def cmd_reject(args, auth: AuthBridge, api: FleetApiClient) -> int:
    return await _decide(args, auth, api, "rejected")


async def cmd_stats(args, auth: AuthBridge, api: FleetApiClient) -> int:
    require_admin(auth)
    s = api.vehicle_stats()
    print(f"📊 Fleet: {s['total']} total | {s['available']} available | "
          f"{s['inUse']} in use | {s['pendingRequests']} pending request(s)")
    return 0


COMMANDS = {
    "login": cmd_login,
    "logout": cmd_logout,
    "whoami": cmd_whoami,
    "vehicles": cmd_vehicles,
    "request": cmd_request,
    "requests": cmd_requests,
    "approve": cmd_approve,
    "reject": cmd_reject,
    "stats": cmd_stats,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fleet", description="Fleet Reservation client")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Sign in with the identity provider")
    p.add_argument("--email", required=True)
    p.add_argument("--password", help="Prompted for when omitted")

    sub.add_parser("logout", help="Sign out")
    sub.add_parser("whoami", help="Show the signed-in profile")

    p = sub.add_parser("vehicles", help="List vehicles, or free ones for a date range")
    p.add_argument("--start")
    p.add_argument("--end")

    p = sub.add_parser("request", help="Ask for a vehicle")
    p.add_argument("--vehicle", type=int, required=True)
    p.add_argument("--start", required=True)
    p.add_argument("--end", required=True)
    p.add_argument("--purpose")

    p = sub.add_parser("requests", help="List requests")
    p.add_argument("--mine", action="store_true")
    p.add_argument("--status", choices=["pending", "approved", "rejected"])

    for name in ("approve", "reject"):
        p = sub.add_parser(name, help=f"{name.capitalize()} a pending request (admin)")
        p.add_argument("id", type=int)

    sub.add_parser("stats", help="Fleet usage snapshot (admin)")
    return parser


async def run(argv: list[str], auth: Optional[AuthBridge] = None,
              api: Optional[FleetApiClient] = None) -> int:
    args = build_parser().parse_args(argv)
    if auth is None:
        store = SessionStore(settings.SESSION_FILE)
        auth = AuthBridge(IdentityProviderClient.from_settings(store))
    api = api or FleetApiClient()

    async with auth:
        try:
            return await COMMANDS[args.command](args, auth, api)
        except AccessDenied as e:
            print(f"⛔ {e}")
            return 2
        except IdentityProviderError as e:
            print(f"❌ Sign-in failed: {e.message}")
            return 1
        except ApiError as e:
            print(f"❌ {e.detail} (HTTP {e.status_code})")
            return 1


def main():
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
