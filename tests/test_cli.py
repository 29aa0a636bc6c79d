import pytest

from disaster_intel import __version__
from disaster_intel.cli import main, parse_args, run_command
from disaster_intel.config import Settings
from disaster_intel.services.factory import ServiceFactory
from disaster_intel.utils.cache.backends import InMemoryCacheBackend, SupabaseCacheBackend


@pytest.fixture
def services(monkeypatch):
    for name in ("SUPABASE_URL", "SUPABASE_KEY", "SUPABASE_ANON_KEY",
                 "GEMINI_API_KEY", "TWITTER_BEARER_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    return ServiceFactory.create_all(Settings(_env_file=None), backend=InMemoryCacheBackend())


class TestParseArgs:
    def test_social_keywords(self):
        args = parse_args(["social", "d1", "-k", "flood", "--keyword", "fire", "--alerts"])

        assert args.command == "social"
        assert args.keyword == ["flood", "fire"]
        assert args.alerts is True

    def test_alerts_and_mock_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["social", "d1", "--alerts", "--mock"])

    def test_cache_action_is_validated(self):
        with pytest.raises(SystemExit):
            parse_args(["cache", "compact"])


class TestFactory:
    def test_services_share_one_cache(self, services):
        assert services.locations.cache is services.cache
        assert services.media.cache is services.cache
        assert services.social.cache is services.cache

    def test_supabase_backend_when_configured(self):
        settings = Settings(
            _env_file=None, supabase={"url": "https://p.supabase.co", "key": "k"}
        )

        assert isinstance(ServiceFactory.create_cache_backend(settings), SupabaseCacheBackend)


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_locate(self, services, capsys):
        code = await run_command(parse_args(["locate", "Flooding in Lower Manhattan"]), services)

        assert code == 0
        assert "Lower Manhattan" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_geocode_sentinel(self, services, capsys):
        code = await run_command(parse_args(["geocode", "Unknown location"]), services)

        assert code == 0
        assert "Unknown location" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_verify_without_key(self, services, capsys):
        code = await run_command(
            parse_args(["verify-image", "https://img.example.test/a.jpg"]), services
        )

        assert code == 0
        assert "API key not available" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_social_mock(self, services, capsys):
        code = await run_command(parse_args(["social", "d1", "--mock"]), services)

        assert code == 0
        assert "mock_d1_5" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_social_alerts(self, services, capsys):
        code = await run_command(parse_args(["social", "d1", "--alerts"]), services)

        assert code == 0
        out = capsys.readouterr().out
        assert "mock_d1_1" in out
        assert "mock_d1_5" not in out

    @pytest.mark.asyncio
    async def test_cache_cleanup(self, services):
        assert await run_command(parse_args(["cache", "cleanup"]), services) == 0

    @pytest.mark.asyncio
    async def test_cache_init_needs_durable_store(self, services):
        assert await run_command(parse_args(["cache", "init"]), services) == 1

    @pytest.mark.asyncio
    async def test_no_command(self, services):
        assert await run_command(parse_args([]), services) == 2


@pytest.mark.asyncio
async def test_version(capsys):
    assert await main(["version"]) == 0
    assert __version__ in capsys.readouterr().out
