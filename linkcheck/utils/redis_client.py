import redis
import ssl
from linkcheck.core.config import settings

def get_redis_client(url: str = None):
    url = url or settings.REDIS_URL
    options = {"decode_responses": True}
    if url.startswith("rediss://"):
        options["ssl_cert_reqs"] = ssl.CERT_NONE
    return redis.Redis(connection_pool=redis.ConnectionPool.from_url(url, **options))
