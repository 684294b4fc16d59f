from __future__ import annotations

from typing import Optional
import unicodedata
from urllib.parse import unquote, urlparse


def normalize_linkedin_profile_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    u = urlparse(url.strip())
    if not u.netloc and not u.scheme:
        # Bare "linkedin.com/in/..." without scheme
        u = urlparse(f"https://{url.strip()}")
    host = (u.netloc or '').lower().replace('www.', '')
    path = (u.path or '').rstrip('/')
    if not host:
        return None
    # Country subdomains (de.linkedin.com, uk.linkedin.com) share one profile namespace
    if host.endswith('.linkedin.com'):
        host = 'linkedin.com'
    if host != 'linkedin.com' or not path.startswith('/in/'):
        return None
    # Keep only /in/{slug} and drop trailing locale/segments (e.g., /de, /en)
    parts = [p for p in path.split('/') if p]
    if len(parts) < 2:
        return None
    # Decode percent-encoding and normalize Unicode; canonicalize to lowercase
    slug = unquote(parts[1])
    slug = unicodedata.normalize('NFKC', slug).strip().lower()
    # Remove invisible characters occasionally present
    slug = slug.replace('\u200b', '').replace('\u200c', '').replace('\u200d', '')
    if not slug:
        return None
    return f"https://linkedin.com/in/{slug}"


def linkedin_id_from_url(url: Optional[str]) -> Optional[str]:
    """Return the id segment of a LinkedIn organization URL.

    https://www.linkedin.com/school/cornell-university/ -> "cornell-university"
    https://www.linkedin.com/company/1035/ -> "1035"
    """
    if not url:
        return None
    parts = [p for p in (urlparse(url).path or '').split('/') if p]
    if len(parts) < 2:
        return None
    return unquote(parts[1]) or None
