"""Integration tests for the packflow CLI."""

import pytest

from packflow.cli.main import cli
from packflow.domain.entities import PaymentStatus, SmsResult
from packflow.domain.errors import SmsGatewayError
from packflow.domain.sms import SmsGateway


class FakeGateway(SmsGateway):
    """Records messages; optionally fails every send."""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send(self, destination, message):
        if self.fail:
            raise SmsGatewayError("Insufficient credits", status_code=402)
        self.sent.append((destination, message))
        return SmsResult(message_id="msg-7", status="SENT", credits=12)


@pytest.fixture
def run(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def invoke(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)

    return invoke


def test_help_does_not_need_database(cli_runner):
    """Test that --help works without a database."""
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "payment" in result.output
    assert "metrics" in result.output


def test_payment_lifecycle(run, temp_db):
    """Test create, list, status and delete commands."""
    result = run("payment", "create", "Acme Ltd", "$1,250.50", "--project", "Kitchen refit")
    assert result.exit_code == 0
    assert "Created payment request 1 for 'Acme Ltd': $1,250.50" in result.output

    result = run("payment", "list")
    assert result.exit_code == 0
    assert "Acme Ltd" in result.output
    assert "Kitchen refit" in result.output
    assert "pending" in result.output

    result = run("payment", "status", "1", "accepted")
    assert result.exit_code == 0
    assert "Payment 1 marked accepted" in result.output
    assert temp_db.get_payment("local", 1).status == PaymentStatus.ACCEPTED

    result = run("payment", "list", "--status", "pending")
    assert "No payments found." in result.output

    result = run("payment", "delete", "1", "--yes")
    assert result.exit_code == 0
    assert "Deleted payment 1" in result.output


def test_payment_create_validation_error(run):
    """Test that a zero total is reported as an error."""
    result = run("payment", "create", "Acme Ltd", "0")

    assert result.exit_code == 1
    assert "Error: Client name and total are required" in result.output


def test_payment_from_sow(run):
    """Test creating a payment from a statement of work."""
    result = run("payment", "from-sow", "Jane Smith", "--hours", "12.5", "--rate", "40", "--fees", "25")

    assert result.exit_code == 0
    assert "Created payment request 1 for 'Jane Smith': $525.00" in result.output


def test_payment_status_not_found(run):
    """Test updating a payment that does not exist."""
    result = run("payment", "status", "42", "paid")

    assert result.exit_code == 1
    assert "Error: Payment 42 not found" in result.output


def test_payment_delete_cancelled(run):
    """Test declining the delete confirmation."""
    run("payment", "create", "Acme Ltd", "10")

    result = run("payment", "delete", "1", input="n\n")

    assert "Deletion cancelled." in result.output
    assert "Acme Ltd" in run("payment", "list").output


def test_payments_are_scoped_by_user(run):
    """Test that --user selects whose payments are shown."""
    result = run("--user", "alice", "payment", "create", "Acme Ltd", "10")
    assert result.exit_code == 0

    assert "Acme Ltd" in run("--user", "alice", "payment", "list").output
    assert "No payments found." in run("--user", "bob", "payment", "list").output
    assert "No payments found." in run("payment", "list").output


def test_payment_create_with_notify(cli_runner, temp_db):
    """Test sending the payment-request SMS on creation."""
    gateway = FakeGateway()

    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "payment",
            "create",
            "Acme Ltd",
            "450",
            "--phone",
            "07123456789",
            "--notify",
        ],
        obj={"sms_gateway": gateway},
    )

    assert result.exit_code == 0
    assert "SMS notification sent to 07123456789" in result.output
    assert gateway.sent[0][0] == "447123456789"
    assert "$450.00" in gateway.sent[0][1]


def test_payment_notify_failure_keeps_payment(cli_runner, temp_db):
    """Test that an SMS failure does not undo the payment."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "payment",
            "create",
            "Acme Ltd",
            "450",
            "--phone",
            "07123456789",
            "--notify",
        ],
        obj={"sms_gateway": FakeGateway(fail=True)},
    )

    assert result.exit_code == 0
    assert "Note: SMS notification failed - Insufficient credits" in result.output
    assert len(temp_db.list_payments("local")) == 1


def test_payment_notify_without_phone(run):
    """Test --notify when no phone number was given."""
    result = run("payment", "create", "Acme Ltd", "450", "--notify")

    assert result.exit_code == 0
    assert "No phone number provided - SMS notification not sent." in result.output


def test_bank_commands(run):
    """Test saving and showing bank details."""
    result = run("bank", "show")
    assert "No bank details saved." in result.output

    result = run("bank", "set", "J Smith", "12345678", "123456")
    assert result.exit_code == 0
    assert "Saved bank details for 'J Smith'" in result.output

    result = run("bank", "show")
    assert "J Smith" in result.output
    assert "12345678" in result.output
    assert "12-34-56" in result.output


def test_bank_set_invalid(run):
    """Test that malformed bank details are rejected."""
    result = run("bank", "set", "J Smith", "1234", "123456")

    assert result.exit_code == 1
    assert "Error: Account number must be exactly 8 digits" in result.output


def test_metrics_without_data(run):
    """Test metrics commands for a user with no revenue."""
    result = run("metrics", "cards")
    assert result.exit_code == 0
    assert "No accepted payments yet." in result.output

    result = run("metrics", "revenue")
    assert result.exit_code == 0
    assert "Total Revenue: $0.00" in result.output
    assert "No accepted revenue in this period" in result.output

    assert "No data available" in run("metrics", "clients").output
    assert "No data available" in run("metrics", "recent").output


def test_metrics_with_revenue(run, tmp_path):
    """Test metrics commands after a payment is accepted."""
    run("payment", "create", "Acme Ltd", "200", "--project", "Kitchen refit")
    run("payment", "create", "Globex", "50")
    run("payment", "status", "1", "accepted")
    run("payment", "status", "2", "rejected")

    result = run("metrics", "cards", "--days", "30")
    assert result.exit_code == 0
    assert "Total Accepted Revenue" in result.output
    assert "$200.00" in result.output
    assert "50.0%" in result.output

    svg_path = tmp_path / "revenue.svg"
    result = run("metrics", "revenue", "--granularity", "days", "--range", "7d", "--chart", "--svg", str(svg_path))
    assert result.exit_code == 0
    assert "Total Revenue: $200.00" in result.output
    assert "Revenue by days (7d):" in result.output
    assert "█" in result.output
    assert svg_path.read_text().startswith("<svg")

    result = run("metrics", "clients")
    assert "Acme Ltd" in result.output
    assert "Globex" not in result.output

    result = run("metrics", "recent")
    assert "Kitchen refit" in result.output


def test_metrics_revenue_falls_back_on_unknown_selectors(run):
    """Test that unknown granularity and range use weeks over 12 weeks."""
    run("payment", "create", "Acme Ltd", "200")
    run("payment", "status", "1", "paid")

    result = run("metrics", "revenue", "--granularity", "fortnights", "--range", "forever")

    assert result.exit_code == 0
    assert "Revenue by weeks (12w):" in result.output
    assert "Week of" in result.output


def test_metrics_cards_client_filter_without_match(run):
    """Test that a client filter with no match shows zeroed cards."""
    run("payment", "create", "Acme Ltd", "200")
    run("payment", "status", "1", "accepted")

    result = run("metrics", "cards", "--client", "initech")

    assert result.exit_code == 0
    assert "N/A" in result.output


def test_realized_statuses_from_environment(run):
    """Test PACKFLOW_REALIZED_STATUSES narrows what counts as revenue."""
    run("payment", "create", "Acme Ltd", "200")
    run("payment", "status", "1", "accepted")

    result = run("metrics", "cards", env={"PACKFLOW_REALIZED_STATUSES": "paid"})
    assert "No accepted payments yet." in result.output

    result = run("metrics", "cards", env={"PACKFLOW_REALIZED_STATUSES": "refunded"})
    assert result.exit_code == 1
    assert "unknown status(es): refunded" in result.output


def test_sms_send(cli_runner, temp_db):
    """Test sending an SMS through the configured gateway."""
    gateway = FakeGateway()

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "sms", "send", "+44 7123 456789", "Invoice ready"],
        obj={"sms_gateway": gateway},
    )

    assert result.exit_code == 0
    assert "SMS sent (ID: msg-7, status: SENT)" in result.output
    assert "Credits remaining: 12" in result.output
    assert gateway.sent == [("447123456789", "Invoice ready")]


def test_sms_send_invalid_number(cli_runner, temp_db):
    """Test that non-UK numbers are rejected before sending."""
    gateway = FakeGateway()

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "sms", "send", "12345", "Hi"],
        obj={"sms_gateway": gateway},
    )

    assert result.exit_code == 1
    assert "Invalid phone number" in result.output
    assert gateway.sent == []


def test_sms_send_without_configuration(run):
    """Test that a missing SMSWORKS_JWT is reported."""
    result = run("sms", "send", "07123456789", "Hi")

    assert result.exit_code == 1
    assert "Error: SMS service not configured" in result.output


def test_sms_notify(cli_runner, temp_db):
    """Test re-sending the payment-request SMS for a stored payment."""
    gateway = FakeGateway()
    args = ["--db-path", temp_db.database_path]
    cli_runner.invoke(cli, [*args, "payment", "create", "Acme Ltd", "99", "--phone", "07123456789"])

    result = cli_runner.invoke(cli, [*args, "sms", "notify", "1"], obj={"sms_gateway": gateway})

    assert result.exit_code == 0
    assert "SMS notification sent to 07123456789" in result.output
    assert len(gateway.sent) == 1


def test_sms_gateway_error_details(cli_runner, temp_db):
    """Test that gateway error details are listed under the error."""

    class RejectingGateway(SmsGateway):
        def send(self, destination, message):
            raise SmsGatewayError(
                "Invalid request", status_code=400, details=["destination is invalid"]
            )

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "sms", "send", "07123456789", "Hi"],
        obj={"sms_gateway": RejectingGateway()},
    )

    assert result.exit_code == 1
    assert "Error: Invalid request" in result.output
    assert "  destination is invalid" in result.output
