def test_env_smoke():
    import numpy as np
    import typer
    import yaml

    assert isinstance(np.__version__, str)
    assert hasattr(typer, "Typer")
    assert hasattr(yaml, "safe_load")
