from app.extensions import db
from app.models import Profile

def test_accounts_create_and_list(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        "accounts", "create",
        "--email", "root@example.com",
        "--password", "secret123",
        "--full-name", "Root Admin",
        "--role", "admin",
    ])
    assert result.exit_code == 0, result.output
    assert "role=admin" in result.output

    with app.app_context():
        p = db.session.query(Profile).filter_by(email="root@example.com").one()
        assert p.role == "admin"

    listed = runner.invoke(args=["accounts", "list", "--role", "admin"])
    assert listed.exit_code == 0
    assert "root@example.com" in listed.output

def test_accounts_create_duplicate_fails(app, make_account):
    make_account("trainee", email="taken@example.com")
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        "accounts", "create",
        "--email", "taken@example.com",
        "--password", "secret123",
        "--full-name", "Again",
    ])
    assert result.exit_code != 0
    assert "already exists" in result.output
