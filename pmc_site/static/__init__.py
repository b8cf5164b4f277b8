from pmc_site.static.resolver import resolve_asset, read_asset, RouteResolution, NOT_FOUND_HTML
