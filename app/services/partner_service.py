import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from app.models.partner import Partner
from app.repositories.partner_repo import PartnerRepository
from app.schemas.partner import PartnerDistribution, PartnerShare
from app.schemas.position import CurrencyAmount
from app.services.currency import ZERO
from app.services.position_service import MonthlyPositionCalculator

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def percentage_warning(total_percentage: Decimal) -> Optional[str]:
    """Describe a partner split that does not cover exactly 100% of the result."""
    if total_percentage == HUNDRED:
        return None
    if total_percentage < HUNDRED:
        return (
            f"Partner percentages add up to {total_percentage}%: "
            f"{HUNDRED - total_percentage}% of the result is unassigned"
        )
    return (
        f"Partner percentages add up to {total_percentage}%: "
        f"the result is over-assigned by {total_percentage - HUNDRED}%"
    )


def distribute(resultado: CurrencyAmount, partners: List[Partner]) -> Tuple[List[PartnerShare], Decimal]:
    """
    Apply each partner's percentage to the period result, per currency.

    Percentages are used as given; amounts are not rounded.
    """
    shares = [
        PartnerShare(
            partner_id=partner.id,
            name=partner.name,
            profit_percentage=partner.profit_percentage,
            amount_ars=resultado.ars * partner.profit_percentage / HUNDRED,
            amount_usd=resultado.usd * partner.profit_percentage / HUNDRED,
        )
        for partner in partners
    ]
    total_percentage = sum((partner.profit_percentage for partner in partners), ZERO)
    return shares, total_percentage


class PartnerDistributionCalculator:
    def __init__(self, partners: PartnerRepository, positions: MonthlyPositionCalculator):
        self.partners = partners
        self.positions = positions

    async def calculate(self, year: int, month: int, scope_id: Optional[str] = None) -> PartnerDistribution:
        position = await self.positions.calculate(year, month, scope_id)
        partners = await self.partners.list_active()

        resultado = position.resultado.resultado
        shares, total_percentage = distribute(resultado, partners)

        warning = percentage_warning(total_percentage)
        if warning:
            logger.warning(warning)

        return PartnerDistribution(
            periodo=position.periodo,
            resultado=resultado,
            total_percentage=total_percentage,
            distributions=shares,
            warning=warning,
        )
