from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory

SERVICE_DIR = Path(__file__).resolve().parents[2] / "services" / "commerce"

def scripts():
    config = Config(str(SERVICE_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(SERVICE_DIR / "alembic"))
    return ScriptDirectory.from_config(config)

def test_revisions_form_a_single_chain():
    script = scripts()
    assert script.get_heads() == ["0002_stock_check"]
    assert [r.revision for r in script.walk_revisions()] == ["0002_stock_check", "0001_init"]
    assert script.get_revision("0002_stock_check").down_revision == "0001_init"
