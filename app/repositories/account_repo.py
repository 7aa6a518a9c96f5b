"""
AccountRepository - Chart of accounts, financial accounts and cash boxes.

Resolution rules:
1. Chart entries are found by account code, active only
2. A chart entry has at most one active financial account bound to it
3. Each currency has at most one active default cash box
"""

from typing import Dict, List, Optional, Tuple
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.account import ChartAccount, FinancialAccount
from app.models.base import Currency, as_object_id, normalize_id
from app.models.cash import CashBox
from app.repositories.errors import translate_mongo_errors


class AccountRepository:
    """Repository resolving accounts by code, chart entry and currency."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.chart_of_accounts = db.chart_of_accounts
        self.financial_accounts = db.financial_accounts
        self.cash_boxes = db.cash_boxes

    @translate_mongo_errors
    async def get_chart_account_by_code(self, account_code: str) -> Optional[ChartAccount]:
        doc = await self.chart_of_accounts.find_one({
            "account_code": account_code,
            "is_active": True
        })
        if not doc:
            return None
        return ChartAccount(**normalize_id(doc))

    @translate_mongo_errors
    async def get_financial_account_for_chart(self, chart_account_id: str) -> Optional[FinancialAccount]:
        doc = await self.financial_accounts.find_one({
            "chart_account_id": chart_account_id,
            "is_active": True
        })
        if not doc:
            return None
        return FinancialAccount(**normalize_id(doc))

    @translate_mongo_errors
    async def get_default_cash_box(self, currency: Currency) -> Optional[CashBox]:
        doc = await self.cash_boxes.find_one({
            "currency": currency.value,
            "is_default": True,
            "is_active": True
        })
        if not doc:
            return None
        return CashBox(**normalize_id(doc))

    @translate_mongo_errors
    async def list_classified_accounts(
        self, scope_id: Optional[str] = None
    ) -> List[Tuple[FinancialAccount, ChartAccount]]:
        """
        Active financial accounts paired with their active chart entry.

        With a scope, global accounts (no scope) are included too: payables
        and equity are usually kept once for the whole business.
        """
        query: Dict = {"is_active": True, "chart_account_id": {"$ne": None}}
        if scope_id is not None:
            query["$or"] = [{"scope_id": scope_id}, {"scope_id": None}]

        account_docs = await self.financial_accounts.find(query).to_list(None)
        accounts = [FinancialAccount(**normalize_id(doc)) for doc in account_docs]

        chart_ids = [as_object_id(a.chart_account_id) for a in accounts]
        chart_docs = await self.chart_of_accounts.find({
            "_id": {"$in": [oid for oid in chart_ids if oid is not None]},
            "is_active": True
        }).to_list(None)
        charts = {c.id: c for c in (ChartAccount(**normalize_id(doc)) for doc in chart_docs)}

        return [
            (account, charts[account.chart_account_id])
            for account in accounts
            if account.chart_account_id in charts
        ]
