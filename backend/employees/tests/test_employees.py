import pytest
from datetime import date
from decimal import Decimal
from rest_framework import status

from core_backend.exceptions import ConflictError, ValidationError
from employees.services import (
    EmployeeService,
    calculate_vacation_proportional,
    validate_roles,
    validate_salary,
)


def employee_payload(business, **overrides):
    payload = {
        "business": business,
        "employee_name": "Nuria Cook",
        "email": "nuria@casalola.test",
        "id_type": "National ID",
        "id_number": "X-1",
        "tax_number": "NT-1",
        "roles": ["Line Cooks"],
        "join_date": date(2020, 5, 1),
        "vacation_days_per_year": 22,
        "pay_frequency": "Monthly",
        "gross_salary": Decimal("2000"),
        "net_salary": Decimal("1600"),
    }
    payload.update(overrides)
    return payload


class TestVacationProportional:

    @pytest.mark.parametrize(
        "join_date, expected",
        [
            (date(2023, 3, 1), 22),
            (date(2024, 1, 1), 22),
            (date(2024, 7, 1), 11),
            (date(2024, 12, 31), 0),
        ],
    )
    def test_share_of_the_year(self, join_date, expected):
        assert calculate_vacation_proportional(join_date, 22, today=date(2024, 12, 31)) == expected

    def test_no_allowance(self):
        assert calculate_vacation_proportional(date(2024, 7, 1), 0, today=date(2024, 12, 31)) == 0


class TestEmployeeValidators:

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError, match="Astronaut"):
            validate_roles(["Waiter", "Astronaut"])

    def test_empty_roles_rejected(self):
        with pytest.raises(ValidationError):
            validate_roles([])

    def test_net_above_gross_rejected(self):
        with pytest.raises(ValidationError):
            validate_salary("Monthly", Decimal("1000"), Decimal("1200"))

    def test_unknown_pay_frequency_rejected(self):
        with pytest.raises(ValidationError):
            validate_salary("Yearly", Decimal("1000"), Decimal("800"))


@pytest.mark.django_db
class TestEmployeeService:

    def test_create_sets_vacation_days(self, business):
        employee = EmployeeService.create_employee(employee_payload(business, join_date=date(2019, 1, 1)))

        assert employee.vacation_days_left == 22

    @pytest.mark.parametrize("field", ["employee_name", "email", "tax_number", "id_number"])
    def test_duplicate_in_business_conflicts(self, business, waiter, field):
        with pytest.raises(ConflictError):
            EmployeeService.create_employee(employee_payload(business, **{field: getattr(waiter, field)}))

    def test_same_identity_in_other_business_allowed(self, business, other_business):
        EmployeeService.create_employee(employee_payload(business))

        employee = EmployeeService.create_employee(employee_payload(other_business))

        assert employee.business == other_business

    def test_shift_role_must_be_held(self, waiter):
        with pytest.raises(ValidationError):
            EmployeeService.update_employee(waiter, {"current_shift_role": "Manager"})

    def test_termination_takes_employee_off_duty(self, waiter):
        employee = EmployeeService.update_employee(waiter, {"terminated_date": date(2024, 6, 30)})

        assert employee.active is False
        assert employee.on_duty is False


@pytest.mark.django_db
class TestEmployeeAPI:

    def _payload(self, business, **overrides):
        payload = employee_payload(business, **overrides)
        payload["business"] = str(business.pk)
        payload["join_date"] = payload["join_date"].isoformat()
        payload["gross_salary"] = str(payload["gross_salary"])
        payload["net_salary"] = str(payload["net_salary"])
        return payload

    def test_create_employee(self, api_client, business):
        response = api_client.post("/api/employees/", self._payload(business), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["roles"] == ["Line Cooks"]
        assert response.data["vacation_days_left"] == 22

    def test_duplicate_email_is_conflict(self, api_client, business, waiter):
        response = api_client.post(
            "/api/employees/", self._payload(business, email=waiter.email), format="json"
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_filter_on_duty(self, api_client, business, waiter, employee_factory):
        employee_factory(name="Off Duty", on_duty=False)

        response = api_client.get(f"/api/employees/?business={business.pk}&on_duty=true")

        assert response.status_code == status.HTTP_200_OK
        assert [row["employee_name"] for row in response.data["results"]] == [waiter.employee_name]
