"""
Tests for the calculation API endpoints.
"""

import pytest

from dealkit.calculations.amortization import calculate_monthly_payment
from dealkit.config import Settings


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestLoanEndpoints:
    """Test payment and amortization endpoints."""

    def test_payment(self, client):
        response = client.post(
            "/api/calculate/payment",
            json={"principal": 300000, "annual_rate": 7.5, "term_years": 30},
        )
        assert response.status_code == 200
        assert response.json()["monthly_payment"] == pytest.approx(2097.64, abs=0.005)

    def test_payment_defaults_to_30_years(self, client):
        response = client.post(
            "/api/calculate/payment",
            json={"principal": 300000, "annual_rate": 7.5},
        )
        assert response.json()["monthly_payment"] == calculate_monthly_payment(
            300000, 7.5, 30
        )

    def test_payment_term_too_long(self, client, settings):
        response = client.post(
            "/api/calculate/payment",
            json={
                "principal": 100000,
                "annual_rate": 7.5,
                "term_years": settings.max_term_years + 1,
            },
        )
        assert response.status_code == 400
        assert "cannot exceed" in response.json()["detail"]

    def test_payment_tiny_rate(self, client):
        response = client.post(
            "/api/calculate/payment",
            json={"principal": 100000, "annual_rate": 1e-15, "term_years": 30},
        )
        assert response.status_code == 200
        assert response.json()["monthly_payment"] == pytest.approx(100000 / 360)

    def test_amortization(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={"principal": 100000, "annual_rate": 6, "term_years": 15},
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["schedule"]) == 180
        assert len(data["yearly"]) == 15
        assert data["schedule"][-1]["balance"] == 0
        assert data["summary"]["monthly_payment"] == 843.86

    def test_amortization_invalid_loan(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={"principal": 0, "annual_rate": 6, "term_years": 15},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["schedule"] == []
        assert data["yearly"] == []
        assert data["summary"]["total_cost"] == 0

    def test_amortization_term_too_long(self, client, settings):
        response = client.post(
            "/api/calculate/amortization",
            json={
                "principal": 100000,
                "annual_rate": 6,
                "term_years": settings.max_term_years + 1,
            },
        )
        assert response.status_code == 400
        assert "cannot exceed" in response.json()["detail"]

    def test_remaining_balance(self, client):
        response = client.post(
            "/api/calculate/remaining-balance",
            json={
                "principal": 300000,
                "annual_rate": 7.5,
                "term_years": 30,
                "months_elapsed": 0,
            },
        )
        assert response.json()["balance"] == 300000

    def test_missing_field(self, client):
        response = client.post("/api/calculate/payment", json={"principal": 1000})
        assert response.status_code == 422


class TestDealEndpoints:
    """Test deal analysis endpoints."""

    def test_analyze_deal(self, client):
        response = client.post(
            "/api/calculate/deal",
            json={
                "purchase_price": 200000,
                "after_repair_value": 300000,
                "repair_costs": 30000,
                "holding_costs": 5000,
                "closing_costs": 8000,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_investment"] == 243000
        assert data["projected_profit"] == 39000
        assert data["return_on_investment"] == 16.0
        assert data["max_allowable_offer"] == 180000
        assert data["monthly_payment"] is None

    def test_analyze_financed_deal(self, client):
        response = client.post(
            "/api/calculate/deal",
            json={
                "purchase_price": 200000,
                "after_repair_value": 300000,
                "repair_costs": 30000,
                "down_payment": 40000,
                "loan_amount": 160000,
                "interest_rate": 7.5,
                "loan_term_years": 30,
            },
        )
        data = response.json()
        assert data["equity"] == 140000
        assert data["monthly_payment"] == calculate_monthly_payment(160000, 7.5, 30)

    def test_mao(self, client):
        response = client.post(
            "/api/calculate/mao",
            json={"after_repair_value": 300000, "repair_costs": 30000},
        )
        assert response.json()["max_allowable_offer"] == 180000


class TestRentalEndpoints:
    """Test rental metric endpoints."""

    def test_rental_cash_flow(self, client):
        response = client.post(
            "/api/calculate/rental-cash-flow",
            json={"monthly_rent": 2000, "monthly_expenses": 500, "monthly_mortgage": 1200},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["effective_gross_income"] == 1840
        assert data["monthly_cash_flow"] == 140
        assert data["annual_cash_flow"] == 1680

    def test_rental_cash_flow_no_vacancy(self, client):
        response = client.post(
            "/api/calculate/rental-cash-flow",
            json={
                "monthly_rent": 2000,
                "monthly_expenses": 500,
                "monthly_mortgage": 1200,
                "vacancy_rate": 0,
            },
        )
        assert response.json()["monthly_cash_flow"] == 300

    def test_cap_rate(self, client):
        response = client.post(
            "/api/calculate/cap-rate",
            json={"net_operating_income": 12000, "property_value": 200000},
        )
        assert response.json()["cap_rate"] == 6.0

    def test_dscr(self, client):
        response = client.post(
            "/api/calculate/dscr",
            json={"net_operating_income": 30000, "annual_debt_service": 0},
        )
        assert response.json()["dscr"] == 0


class TestMortgageEndpoints:
    """Test mortgage tracking endpoints."""

    def test_mortgage_schedule(self, client):
        response = client.post(
            "/api/calculate/mortgage/schedule",
            json={
                "principal": 120000,
                "annual_rate": 0,
                "term_months": 120,
                "start_date": "2024-01-15",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["entries"]) == 120
        assert data["summary"]["payoff_date"] == "2034-01-15"

    def test_extra_payments(self, client):
        payment = calculate_monthly_payment(200000, 6, 30)
        response = client.post(
            "/api/calculate/mortgage/extra-payments",
            json={
                "current_balance": 200000,
                "annual_rate": 6,
                "monthly_payment": payment,
                "extra_amounts": [100, 250],
                "start_date": "2024-01-01",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["scenarios"]) == 2
        assert data["scenarios"][1]["months_saved"] > data["scenarios"][0]["months_saved"]
        assert data["breakdown"]["interest"] == 1000.0

    def test_too_many_extra_payments(self, client, settings):
        response = client.post(
            "/api/calculate/mortgage/extra-payments",
            json={
                "current_balance": 200000,
                "annual_rate": 6,
                "monthly_payment": 1200,
                "extra_amounts": [50] * (settings.max_extra_scenarios + 1),
            },
        )
        assert response.status_code == 400


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.max_term_years == 50
        assert settings.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MAX_TERM_YEARS", "40")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        settings = Settings()
        assert settings.max_term_years == 40
        assert settings.log_level == "DEBUG"
