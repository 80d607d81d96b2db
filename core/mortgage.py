"""
Mortgage Calculator

Monthly payment breakdown for a purchase financed with a fixed-rate loan:
- Principal and interest (standard amortization formula)
- Property tax, insurance, HOA
- PMI when the down payment is below 20%
- Lifetime interest and total cost
"""

import logging
from dataclasses import dataclass, replace
from typing import List

from .models import InputValidationError, require_finite


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Constants
# =============================================================================

# PMI applies below this down payment percentage
PMI_DOWN_PAYMENT_THRESHOLD = 20.0

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class MortgageInputs:
    """
    Loan scenario. Percentages are expressed as 0-100.

    Defaults mirror the calculator's initial form state.
    """

    property_price: float = 500000
    down_payment_percent: float = 20.0
    annual_interest_rate_percent: float = 6.5
    loan_term_years: int = 30
    annual_property_tax_percent: float = 1.2
    annual_insurance_percent: float = 0.5
    monthly_hoa: float = 0.0
    annual_pmi_percent: float = 0.5

    def validate(self) -> None:
        """
        Reject malformed input before any arithmetic happens.

        Raises:
            InputValidationError: naming the first offending field
        """
        for name in (
            "property_price",
            "down_payment_percent",
            "annual_interest_rate_percent",
            "loan_term_years",
            "annual_property_tax_percent",
            "annual_insurance_percent",
            "monthly_hoa",
            "annual_pmi_percent",
        ):
            require_finite(name, getattr(self, name))

        if self.property_price <= 0:
            raise InputValidationError("property_price", "must be positive")
        if self.loan_term_years <= 0:
            raise InputValidationError("loan_term_years", "must be positive")
        if not 0 <= self.down_payment_percent <= 100:
            raise InputValidationError("down_payment_percent", "must be between 0 and 100")
        if self.annual_interest_rate_percent < 0:
            raise InputValidationError("annual_interest_rate_percent", "must not be negative")
        if self.annual_property_tax_percent < 0:
            raise InputValidationError("annual_property_tax_percent", "must not be negative")
        if self.annual_insurance_percent < 0:
            raise InputValidationError("annual_insurance_percent", "must not be negative")
        if self.monthly_hoa < 0:
            raise InputValidationError("monthly_hoa", "must not be negative")
        if self.annual_pmi_percent < 0:
            raise InputValidationError("annual_pmi_percent", "must not be negative")


@dataclass(frozen=True)
class MortgageBreakdown:
    """Every line item of a monthly payment, plus lifetime totals."""

    loan_amount: float
    monthly_rate: float
    number_of_payments: int
    principal_and_interest: float
    monthly_tax: float
    monthly_insurance: float
    monthly_hoa: float
    monthly_pmi: float
    total_monthly: float
    total_interest: float
    total_cost: float

    @property
    def pmi_required(self) -> bool:
        return self.monthly_pmi > 0

    def rounded(self, places: int = 2) -> "MortgageBreakdown":
        """Copy with money values rounded for display."""
        return replace(
            self,
            loan_amount=round(self.loan_amount, places),
            principal_and_interest=round(self.principal_and_interest, places),
            monthly_tax=round(self.monthly_tax, places),
            monthly_insurance=round(self.monthly_insurance, places),
            monthly_hoa=round(self.monthly_hoa, places),
            monthly_pmi=round(self.monthly_pmi, places),
            total_monthly=round(self.total_monthly, places),
            total_interest=round(self.total_interest, places),
            total_cost=round(self.total_cost, places),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "loanAmount": self.loan_amount,
            "monthlyRate": self.monthly_rate,
            "numberOfPayments": self.number_of_payments,
            "monthlyPayment": self.principal_and_interest,
            "principalAndInterest": self.principal_and_interest,
            "monthlyTax": self.monthly_tax,
            "monthlyInsurance": self.monthly_insurance,
            "monthlyHOA": self.monthly_hoa,
            "monthlyPMI": self.monthly_pmi,
            "totalMonthly": self.total_monthly,
            "totalInterest": self.total_interest,
            "totalCost": self.total_cost,
        }


@dataclass(frozen=True)
class AmortizationYear:
    """Principal and interest paid during one loan year."""

    year: int
    principal_paid: float
    interest_paid: float
    ending_balance: float

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "principalPaid": self.principal_paid,
            "interestPaid": self.interest_paid,
            "endingBalance": self.ending_balance,
        }


class MortgageCalculator:
    """
    Fixed-rate mortgage calculator.

    Stateless: a single instance can serve any number of scenarios.
    """

    def calculate(self, inputs: MortgageInputs) -> MortgageBreakdown:
        """
        Compute the monthly payment breakdown.

        Args:
            inputs: The loan scenario

        Returns:
            MortgageBreakdown with every intermediate value

        Raises:
            InputValidationError: if any input is out of range
        """
        inputs.validate()

        loan_amount = inputs.property_price * (1 - inputs.down_payment_percent / 100)
        monthly_rate = inputs.annual_interest_rate_percent / 100 / MONTHS_PER_YEAR
        number_of_payments = int(round(inputs.loan_term_years * MONTHS_PER_YEAR))
        if number_of_payments < 1:
            raise InputValidationError("loan_term_years", "must cover at least one monthly payment")

        principal_and_interest = self._monthly_principal_and_interest(
            loan_amount, monthly_rate, number_of_payments
        )

        monthly_tax = inputs.property_price * inputs.annual_property_tax_percent / 100 / MONTHS_PER_YEAR
        monthly_insurance = inputs.property_price * inputs.annual_insurance_percent / 100 / MONTHS_PER_YEAR
        monthly_hoa = float(inputs.monthly_hoa)

        if inputs.down_payment_percent < PMI_DOWN_PAYMENT_THRESHOLD:
            monthly_pmi = loan_amount * inputs.annual_pmi_percent / 100 / MONTHS_PER_YEAR
        else:
            monthly_pmi = 0.0

        total_monthly = (
            principal_and_interest
            + monthly_tax
            + monthly_insurance
            + monthly_hoa
            + monthly_pmi
        )
        total_interest = principal_and_interest * number_of_payments - loan_amount
        total_cost = inputs.property_price + total_interest

        logger.debug(
            "Mortgage computed: loan=%.2f rate=%.6f n=%d total_monthly=%.2f",
            loan_amount,
            monthly_rate,
            number_of_payments,
            total_monthly,
        )

        return MortgageBreakdown(
            loan_amount=loan_amount,
            monthly_rate=monthly_rate,
            number_of_payments=number_of_payments,
            principal_and_interest=principal_and_interest,
            monthly_tax=monthly_tax,
            monthly_insurance=monthly_insurance,
            monthly_hoa=monthly_hoa,
            monthly_pmi=monthly_pmi,
            total_monthly=total_monthly,
            total_interest=total_interest,
            total_cost=total_cost,
        )

    def amortization_schedule(self, inputs: MortgageInputs) -> List[AmortizationYear]:
        """
        Year-by-year principal/interest split over the loan term.

        Args:
            inputs: The loan scenario

        Returns:
            One AmortizationYear per loan year, ending at a zero balance
        """
        breakdown = self.calculate(inputs)
        payment = breakdown.principal_and_interest
        rate = breakdown.monthly_rate
        balance = breakdown.loan_amount

        schedule = []
        principal_year = 0.0
        interest_year = 0.0

        for month in range(1, breakdown.number_of_payments + 1):
            interest = balance * rate
            principal = payment - interest
            # Last payment absorbs float residue
            if month == breakdown.number_of_payments:
                principal = balance
            balance -= principal
            principal_year += principal
            interest_year += interest

            if month % MONTHS_PER_YEAR == 0 or month == breakdown.number_of_payments:
                schedule.append(
                    AmortizationYear(
                        year=(month - 1) // MONTHS_PER_YEAR + 1,
                        principal_paid=principal_year,
                        interest_paid=interest_year,
                        ending_balance=max(balance, 0.0),
                    )
                )
                principal_year = 0.0
                interest_year = 0.0

        return schedule

    @staticmethod
    def _monthly_principal_and_interest(
        loan_amount: float,
        monthly_rate: float,
        number_of_payments: int,
    ) -> float:
        """
        Standard amortization payment.

        P * r * (1+r)^n / ((1+r)^n - 1), or P / n at a zero rate where
        the formula's denominator vanishes.
        """
        if monthly_rate == 0:
            return loan_amount / number_of_payments

        growth = (1 + monthly_rate) ** number_of_payments
        if growth == 1:
            # Rate too small to register in floating point
            return loan_amount / number_of_payments
        return loan_amount * monthly_rate * growth / (growth - 1)
