from reportgraph.core.config_loader import DEFAULT_OUTPUTS, ConfigLoader


class TestConfigLoader:
    def test_defaults_are_merged(self, tmp_path):
        config_path = tmp_path / "job.yaml"
        config_path.write_text("report_path: auto\n", encoding="utf-8")

        loader = ConfigLoader(config_path)

        assert loader.config["outputs"] == DEFAULT_OUTPUTS
        assert loader.graph_config["limits"] == {"max_nodes": 200, "max_edges": 300}
        assert loader.graph_config["edge_styles"]["similarity"]["distance"] == 80
        assert loader.config["report_settings"]["top_dependents"] == 10

    def test_user_values_override_nested_defaults(self, tmp_path):
        config_path = tmp_path / "job.yaml"
        config_path.write_text(
            "outputs: [json]\n"
            "visualization:\n"
            "  report_graph:\n"
            "    limits:\n"
            "      max_nodes: 50\n"
            "    edge_styles:\n"
            "      related:\n"
            "        color: '#000000'\n",
            encoding="utf-8",
        )

        graph_config = ConfigLoader(config_path).graph_config

        assert graph_config["limits"] == {"max_nodes": 50, "max_edges": 300}
        assert graph_config["edge_styles"]["related"]["color"] == "#000000"
        assert graph_config["edge_styles"]["related"]["distance"] == 150

    def test_empty_file_is_empty_config(self, tmp_path):
        config_path = tmp_path / "job.yaml"
        config_path.write_text("", encoding="utf-8")

        assert ConfigLoader(config_path).config["outputs"] == DEFAULT_OUTPUTS

    def test_missing_file(self, tmp_path):
        loader = ConfigLoader(tmp_path / "missing.yaml")

        assert loader.config is None
        assert loader.graph_config == {}

    def test_invalid_yaml(self, tmp_path):
        config_path = tmp_path / "job.yaml"
        config_path.write_text("outputs: [json\n", encoding="utf-8")

        assert ConfigLoader(config_path).config is None

    def test_non_mapping_top_level(self, tmp_path):
        config_path = tmp_path / "job.yaml"
        config_path.write_text("- json\n- graph\n", encoding="utf-8")

        assert ConfigLoader(config_path).config is None


class TestUpdateConfigFile:
    def test_updates_nested_keys_and_keeps_comments(self, tmp_path):
        config_path = tmp_path / "job.yaml"
        config_path.write_text(
            "# keep this comment\nvisualization:\n  report_graph:\n    dpi: 300\n",
            encoding="utf-8",
        )

        ConfigLoader.update_config_file(
            config_path,
            {"visualization.report_graph.filtering.exclude_nodes": ["*test*"], "auto_truncate": True},
        )

        assert "# keep this comment" in config_path.read_text(encoding="utf-8")
        loader = ConfigLoader(config_path)
        assert loader.graph_config["filtering"]["exclude_nodes"] == ["*test*"]
        assert loader.graph_config["dpi"] == 300
        assert loader.config["auto_truncate"] is True
