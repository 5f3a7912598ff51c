from openapi_ir.config import ConverterConfig, ExportDocumentConfig


class TestConverterConfig:
    def test_defaults(self):
        config = ConverterConfig()
        assert config.service_name == "Service"
        assert config.union_value_key == "value"
        assert config.document == ExportDocumentConfig()
        assert not config.strict_references

    def test_from_dict(self):
        config = ConverterConfig.from_dict(
            {
                "strict_references": True,
                "document": {"title": "Blog API", "api_version": "2.1.0"},
                "unknown_option": 42,
            }
        )
        assert config.strict_references
        assert config.document.title == "Blog API"
        assert config.document.openapi_version == "3.0.3"
        assert not hasattr(config, "unknown_option")

    def test_dict_roundtrip(self):
        config = ConverterConfig(service_name="Blog", include_discriminator=False)
        assert ConverterConfig.from_dict(config.to_dict()) == config
