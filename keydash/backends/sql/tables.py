import datetime as dt
import sqlalchemy as sa

from keydash.datatypes import KeyStatus

metadata = sa.MetaData()

admins_table = sa.Table(
    "admins",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("username", sa.String(128), nullable=False, unique=True),
    sa.Column("password", sa.String(256), nullable=False),
)

resellers_table = sa.Table(
    "resellers",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("username", sa.String(128), nullable=False, unique=True),
    sa.Column("email", sa.String(256), nullable=False, unique=True),
    sa.Column("password", sa.String(256), nullable=False),
    sa.Column("credits", sa.Integer, nullable=False, default=0),
    sa.Column("keys_generated", sa.Integer, nullable=False, default=0),
    sa.Column("created_at", sa.DateTime, default=dt.datetime.utcnow, nullable=False),
    sa.CheckConstraint("credits >= 0", name="ck_resellers_credits_non_negative"),
)

sa.Index("ix_resellers_email_lower", sa.func.lower(resellers_table.c.email), unique=True)

referral_tokens_table = sa.Table(
    "referral_tokens",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("token", sa.String(128), nullable=False, unique=True),
    sa.Column("used", sa.Boolean, nullable=False, default=False),
    sa.Column("created_at", sa.DateTime, default=dt.datetime.utcnow, nullable=False),
)

keys_table = sa.Table(
    "keys",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("key", sa.String(128), nullable=False, unique=True),
    sa.Column("game", sa.String(128), nullable=False),
    sa.Column("device_limit", sa.Integer, nullable=False),
    sa.Column("devices_used", sa.Integer, nullable=False, default=0),
    sa.Column("expiry_date", sa.DateTime, nullable=False),
    sa.Column(
        "status",
        sa.Enum(KeyStatus, native_enum=False, length=16),
        nullable=False,
        default=KeyStatus.active,
    ),
    sa.Column("reseller_id", sa.Integer, sa.ForeignKey("resellers.id"), nullable=False),
    sa.Column("created_at", sa.DateTime, default=dt.datetime.utcnow, nullable=False),
    sa.CheckConstraint("devices_used <= device_limit", name="ck_keys_devices_within_limit"),
    sa.Index("idx_keys_reseller_id", "reseller_id"),
)

devices_table = sa.Table(
    "devices",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("key_id", sa.Integer, sa.ForeignKey("keys.id"), nullable=False),
    sa.Column("hwid", sa.String(256), nullable=False),
    sa.Column("created_at", sa.DateTime, default=dt.datetime.utcnow, nullable=False),
    sa.UniqueConstraint("key_id", "hwid", name="uq_devices_key_hwid"),
)
