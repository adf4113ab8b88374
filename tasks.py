import sys
from invoke import task
from pathlib import Path

# Get project root directory
PROJECT_ROOT = Path(__file__).parent.absolute()

# Note: .env file is automatically loaded by Django settings
# No need to load it here to avoid duplication


def project_relative(path):
    """Convert a relative path to an absolute path relative to the project root."""
    return str(PROJECT_ROOT / path)


def import_database():
    """Import the default database settings from Django settings."""
    sys.path.insert(0, str(PROJECT_ROOT))
    from debatetab.settings import DATABASES
    return DATABASES['default']


@task
def update(c):
    """Update all dependencies to their latest versions using poetry."""
    c.run("poetry update")


@task
def up(c):
    """Alias for update - update all dependencies to their latest versions."""
    update(c)


@task
def createdb(c):
    """Create a new PostgreSQL database for the project."""
    database = import_database()
    if database['ENGINE'].endswith('sqlite3'):
        print("SQLite database is created by migrate; nothing to do")
        return

    c.run(f"createdb -U {database['USER']} {database['NAME']}", warn=True)

    if database['PASSWORD']:
        print(f"Note: Database created. You may need to configure password access for user {database['USER']}")


@task
def runserver(c):
    """Run the Django development server on 0.0.0.0:8000."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} runserver 0.0.0.0:8000")


@task
def migrate(c):
    """Run Django database migrations."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} migrate")


@task
def makemigrations(c):
    """Create new Django migrations."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} makemigrations")


@task
def shell(c):
    """Start Django shell."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} shell")


@task
def test(c, path=None):
    """Run the test suite with pytest. Optionally specify a specific test path."""
    if path:
        c.run(f"pytest {path}")
    else:
        c.run("pytest")


@task
def seed(c, name="Demo Open", format="BP", teams=16, rounds=5):
    """Seed a demo tournament with Faker-generated teams."""
    manage_py = project_relative("manage.py")
    c.run(
        f'python {manage_py} seed_tournament --name "{name}" --format {format} '
        f"--teams {teams} --rounds {rounds} --clear-existing"
    )


@task
def pair(c, tournament, round_number, mode="random", commit=False, overwrite=False):
    """Preview (or commit) the pairings for a round."""
    manage_py = project_relative("manage.py")
    flags = f"--mode {mode}"
    if commit:
        flags += " --commit"
    if overwrite:
        flags += " --overwrite"
    c.run(f"python {manage_py} generate_pairings {tournament} {round_number} {flags}")


@task
def standings(c, tournament, speakers=False):
    """Print team (or speaker) standings for a tournament."""
    manage_py = project_relative("manage.py")
    flags = " --speakers" if speakers else ""
    c.run(f"python {manage_py} show_standings {tournament}{flags}")


@task
def createsuperuser(c):
    """Create a Django superuser."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} createsuperuser")
