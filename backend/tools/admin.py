"""Operator CLI

Usage:
    python tools/admin.py stats                          service summary
    python tools/admin.py users                          user list
    python tools/admin.py users --role admin             filter by role
    python tools/admin.py user ops@example.com create <password> [name]
    python tools/admin.py user ops@example.com role admin
    python tools/admin.py user ops@example.com disable
    python tools/admin.py user ops@example.com enable
    python tools/admin.py centers [--pending]            center list
    python tools/admin.py approve 12                     approve a pending center
    python tools/admin.py payments --days 7              recent payments
"""
import argparse
import asyncio
import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select, func, desc

from infrastructure.persistence.database import engine, get_db_session, init_db
from infrastructure.persistence.models import (
    User, Center, Payment, Enrollment, Referral,
    UserRole, SubscriptionPlan, PaymentStatus, EnrollmentStatus, ReferralStatus,
)
from infrastructure.persistence.repositories import (
    SqlCenterRepository, SqlUserRepository, SqlNotificationRepository,
)
from infrastructure.auth.password_service import hash_password
from application.use_cases.approve_center import ApproveCenterUseCase
from domain.exceptions import CenterNotFoundError


class CommandError(Exception):
    pass


# ==================== helpers ====================

def fmt_date(dt) -> str:
    if not dt:
        return "-"
    return dt.strftime("%Y-%m-%d %H:%M")


def fmt_rupees(paise: int) -> str:
    return f"₹{(paise or 0) / 100:,.2f}"


def print_table(headers: list, rows: list):
    widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
              for i, h in enumerate(headers)]
    header_line = "".join(str(h).ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))
    for row in rows:
        print("".join(str(c).ljust(w) for c, w in zip(row, widths)))


async def find_user(s, email: str) -> User:
    user = (await s.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if user is None:
        raise CommandError(f"User not found: {email}")
    return user


# ==================== commands ====================

async def cmd_stats():
    async with get_db_session() as s:
        total_users = (await s.execute(select(func.count(User.id)))).scalar()
        role_counts = dict((await s.execute(
            select(User.role, func.count(User.id)).group_by(User.role))).all())
        plan_counts = dict((await s.execute(
            select(User.subscription_plan, func.count(User.id)).group_by(User.subscription_plan))).all())
        enrollment_counts = dict((await s.execute(
            select(Enrollment.status, func.count(Enrollment.id)).group_by(Enrollment.status))).all())
        revenue = (await s.execute(
            select(func.sum(Payment.amount)).where(Payment.status == PaymentStatus.COMPLETED))).scalar() or 0
        referral_counts = dict((await s.execute(
            select(Referral.status, func.count(Referral.id)).group_by(Referral.status))).all())
        pending_centers = (await s.execute(
            select(func.count(Center.id)).where(Center.verified.is_(False)))).scalar()

    print("=== Service summary ===\n")
    print(f"[Users] {total_users}")
    for role in UserRole:
        print(f"  {role.value}: {role_counts.get(role, 0)}")
    for plan in SubscriptionPlan:
        print(f"  {plan.value}: {plan_counts.get(plan, 0)}")

    print("\n[Enrollments]")
    for status in EnrollmentStatus:
        print(f"  {status.value}: {enrollment_counts.get(status, 0)}")

    print(f"\n[Revenue] {fmt_rupees(revenue)}")

    print("\n[Referrals]")
    for status in ReferralStatus:
        print(f"  {status.value}: {referral_counts.get(status, 0)}")

    print(f"\n[Centers awaiting approval] {pending_centers}")


async def cmd_users(role_filter: str = None):
    async with get_db_session() as s:
        q = select(User).order_by(desc(User.created_at))
        if role_filter:
            if role_filter not in {r.value for r in UserRole}:
                raise CommandError(f"Unknown role: {role_filter}")
            q = q.where(User.role == UserRole(role_filter))
        users = (await s.execute(q)).scalars().all()

    if not users:
        print("No users.")
        return

    rows = [[u.id, u.email, u.name or "-", u.role.value, u.subscription_plan.value,
             u.city or "-", "active" if u.is_active else "disabled", fmt_date(u.created_at)]
            for u in users]
    print(f"{len(rows)} users:\n")
    print_table(["ID", "Email", "Name", "Role", "Plan", "City", "Status", "Joined"], rows)


async def cmd_user_create(email: str, password: str, name: str = None):
    async with get_db_session() as s:
        if (await s.execute(select(User.id).where(User.email == email))).scalar_one_or_none():
            raise CommandError(f"Email already registered: {email}")
        s.add(User(email=email, password_hash=hash_password(password),
                   name=name or email.split("@")[0],
                   role=UserRole.STUDENT, subscription_plan=SubscriptionPlan.FREE))
    print(f"Created user {email}")


async def cmd_user_role(email: str, role: str):
    try:
        new_role = UserRole(role)
    except ValueError:
        raise CommandError(f"Unknown role: {role} ({', '.join(r.value for r in UserRole)})")

    async with get_db_session() as s:
        user = await find_user(s, email)
        old_role = user.role.value
        user.role = new_role
    print(f"{email}: {old_role} -> {new_role.value}")


async def cmd_user_toggle(email: str, enable: bool):
    async with get_db_session() as s:
        user = await find_user(s, email)
        user.is_active = enable
    print(f"{email}: {'enabled' if enable else 'disabled'}")


async def cmd_centers(pending_only: bool = False):
    async with get_db_session() as s:
        q = select(Center).order_by(Center.city, Center.name)
        if pending_only:
            q = q.where(Center.verified.is_(False))
        centers = (await s.execute(q)).scalars().all()

    if not centers:
        print("No centers.")
        return

    rows = [[c.id, c.name[:30], c.city, c.referral_code, "yes" if c.verified else "pending",
             c.upi_id or "-", fmt_date(c.created_at)]
            for c in centers]
    print_table(["ID", "Name", "City", "Code", "Verified", "Fund account", "Created"], rows)


async def cmd_approve(center_id: int):
    async with get_db_session() as s:
        use_case = ApproveCenterUseCase(SqlCenterRepository(s), SqlUserRepository(s),
                                        SqlNotificationRepository(s))
        try:
            center = await use_case.execute(center_id)
        except CenterNotFoundError as e:
            raise CommandError(e.message)
    print(f"Approved {center.name} ({center.referral_code})")


async def cmd_payments(days: int = 30):
    since = datetime.utcnow() - timedelta(days=days)
    async with get_db_session() as s:
        result = await s.execute(
            select(Payment, User.email)
            .join(User, Payment.user_id == User.id)
            .where(Payment.created_at >= since)
            .order_by(desc(Payment.created_at))
            .limit(100)
        )
        rows_raw = result.all()

    if not rows_raw:
        print(f"No payments in the last {days} days.")
        return

    rows = [[fmt_date(p.paid_at or p.created_at), email[:25], p.order_id, p.emi_plan or "-",
             fmt_rupees(p.amount), p.status.value]
            for p, email in rows_raw]
    print(f"Payments, last {days} days ({len(rows)}):\n")
    print_table(["Date", "User", "Order", "Plan", "Amount", "Status"], rows)


# ==================== main ====================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Enrollment service operator CLI",
                                     formatter_class=argparse.RawDescriptionHelpFormatter,
                                     epilog=__doc__)
    parser.add_argument("command", help="command")
    parser.add_argument("args", nargs="*", help="command arguments")
    parser.add_argument("--role", help="role filter (users)")
    parser.add_argument("--pending", action="store_true", help="only unverified centers (centers)")
    parser.add_argument("--days", type=int, default=30, help="window in days (payments)")
    return parser


def dispatch(parser: argparse.ArgumentParser, args: argparse.Namespace):
    """Return the coroutine for the parsed command"""
    cmd = args.command

    if cmd == "stats":
        return cmd_stats()
    if cmd == "users":
        return cmd_users(args.role)
    if cmd == "centers":
        return cmd_centers(args.pending)
    if cmd == "payments":
        return cmd_payments(args.days)
    if cmd == "approve":
        if len(args.args) != 1 or not args.args[0].isdigit():
            parser.error("usage: admin.py approve <center_id>")
        return cmd_approve(int(args.args[0]))
    if cmd == "user":
        if len(args.args) < 2:
            parser.error("usage: admin.py user <email> <create|role|enable|disable> ...")
        email, action, rest = args.args[0], args.args[1], args.args[2:]
        if action == "create":
            if not rest:
                parser.error("usage: admin.py user <email> create <password> [name]")
            return cmd_user_create(email, rest[0], rest[1] if len(rest) > 1 else None)
        if action == "role":
            if not rest:
                parser.error("usage: admin.py user <email> role <student|center|admin>")
            return cmd_user_role(email, rest[0])
        if action in ("enable", "disable"):
            return cmd_user_toggle(email, action == "enable")
        parser.error(f"unknown user action: {action}")
    parser.error(f"unknown command: {cmd}")


async def run(coro):
    await init_db()
    try:
        await coro
    finally:
        await engine.dispose()


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        asyncio.run(run(dispatch(parser, args)))
    except CommandError as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
