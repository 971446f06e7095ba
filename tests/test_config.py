"""
test_config.py — Tests para el módulo de configuración.

Verificamos que:
1. La configuración se carga correctamente desde config.yaml
2. Las variables de entorno se resuelven
3. Los valores por defecto funcionan cuando no hay archivo
4. --root e IMPRENTA_ROOT deciden la raíz del blog
"""

from pathlib import Path
from unittest.mock import patch

from imprenta.config import (
    AppConfig,
    BlogConfig,
    GitConfig,
    load_config,
    _resolve_env_vars,
    _resolve_env_recursive,
)


class TestResolveEnvVars:
    """Tests para la resolución de variables de entorno."""

    def test_resuelve_variable_existente(self):
        """Debe reemplazar ${VAR} con el valor de la variable de entorno."""
        with patch.dict("os.environ", {"MI_VAR": "hola"}):
            assert _resolve_env_vars("${MI_VAR}/path") == "hola/path"

    def test_mantiene_variable_inexistente(self):
        """Si la variable no existe, debe mantener el placeholder."""
        assert _resolve_env_vars("${NO_EXISTE_IMPRENTA}") == "${NO_EXISTE_IMPRENTA}"

    def test_resuelve_en_dict_anidado(self):
        with patch.dict("os.environ", {"PATH_VAR": "/mi/path"}):
            datos = {"nivel1": {"nivel2": "${PATH_VAR}"}, "lista": ["${PATH_VAR}"]}
            resultado = _resolve_env_recursive(datos)
            assert resultado["nivel1"]["nivel2"] == "/mi/path"
            assert resultado["lista"] == ["/mi/path"]

    def test_no_modifica_booleanos(self):
        assert _resolve_env_recursive(True) is True


class TestDefaults:
    """Valores por defecto de las dataclasses."""

    def test_colecciones_por_defecto(self):
        blog = BlogConfig()
        assert blog.drafts_dir == "drafts"
        assert blog.articles_dir == "articles"
        assert blog.drafts_meta_dir == "meta/drafts"
        assert blog.articles_meta_dir == "meta/articles"
        assert blog.content_extension == ".md"
        assert blog.meta_extension == ".yaml"

    def test_mensaje_de_commit(self):
        assert GitConfig().commit_message("foo") == "Publishing 'foo'"

    def test_root_vacio_es_directorio_actual(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert BlogConfig().root_path == Path.cwd()

    def test_no_push_por_defecto(self):
        assert AppConfig().git.push is False


class TestLoadConfig:
    """Tests para la función load_config."""

    def test_carga_sin_archivo(self, tmp_path, monkeypatch):
        """Sin config.yaml se usan valores por defecto."""
        monkeypatch.delenv("IMPRENTA_ROOT", raising=False)
        with patch("imprenta.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert isinstance(config, AppConfig)
        assert config.source is None
        assert config.blog.drafts_dir == "drafts"

    def test_carga_yaml_e_ignora_campos_desconocidos(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "blog:\n"
            "  drafts_meta_dir: drafts\n"
            "  articles_meta_dir: articles\n"
            "  meta_extension: .rb\n"
            "  unknown_key: 1\n"
            "git:\n"
            "  commit_template: \"Publish {slug}\"\n",
            encoding="utf-8",
        )
        config = load_config(root=tmp_path)
        assert config.blog.meta_extension == ".rb"
        assert config.blog.drafts_meta_dir == "drafts"
        assert config.git.commit_message("x") == "Publish x"
        assert config.source == tmp_path.resolve()

    def test_root_por_defecto_es_directorio_del_yaml(self, tmp_path, monkeypatch):
        """Desde un subdirectorio, la raíz es donde está config.yaml."""
        monkeypatch.delenv("IMPRENTA_ROOT", raising=False)
        (tmp_path / "config.yaml").write_text("blog: {}\n", encoding="utf-8")
        sub = tmp_path / "drafts"
        sub.mkdir()
        monkeypatch.chdir(sub)
        config = load_config()
        assert config.blog.root_path == tmp_path.resolve()

    def test_imprenta_root_desde_entorno(self, tmp_path, monkeypatch):
        monkeypatch.setenv("IMPRENTA_ROOT", str(tmp_path))
        with patch("imprenta.config._find_config_dir", return_value=tmp_path / "nada"):
            config = load_config()
        assert config.blog.root == str(tmp_path)

    def test_placeholder_sin_resolver_no_es_raiz(self, tmp_path, monkeypatch):
        monkeypatch.delenv("BLOG_REPO_PATH_INEXISTENTE", raising=False)
        monkeypatch.delenv("IMPRENTA_ROOT", raising=False)
        (tmp_path / "config.yaml").write_text(
            "blog:\n  root: ${BLOG_REPO_PATH_INEXISTENTE}\n", encoding="utf-8"
        )
        with patch("imprenta.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert config.blog.root == str(tmp_path)

    def test_root_explicito_gana(self, tmp_path, monkeypatch):
        monkeypatch.setenv("IMPRENTA_ROOT", "/otro/lado")
        config = load_config(root=tmp_path)
        assert config.blog.root == str(tmp_path)

    def test_env_file_se_carga(self, tmp_path, monkeypatch):
        monkeypatch.delenv("IMPRENTA_TEST_BLOG", raising=False)
        (tmp_path / ".env").write_text(f"IMPRENTA_TEST_BLOG={tmp_path}\n", encoding="utf-8")
        (tmp_path / "config.yaml").write_text(
            "blog:\n  root: ${IMPRENTA_TEST_BLOG}\n", encoding="utf-8"
        )
        with patch("imprenta.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert config.blog.root == str(tmp_path)
