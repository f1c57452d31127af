"""URL rewriting for backend forwarding."""

from services.targets import BackendTarget


class RequestTransformer:
    """Rewrite inbound request targets onto the backend."""

    def rewrite_url(self, target: BackendTarget, path: str, query: str = "") -> str:
        """Replace scheme and host, prepend the backend base path.

        The path is concatenated verbatim; no normalisation is applied.
        """
        url = f"{target.scheme}://{target.authority}{target.base_path}{path}"
        if query:
            url += f"?{query}"
        return url
