from pmc_site.main.main import app
from pmc_site.config import config_instance
from pmc_site.utils.utils import is_development
import uvicorn


if __name__ == '__main__':
    # Start the site server
    settings = config_instance()
    if is_development(config_instance=config_instance):
        uvicorn.run("app:app", host="127.0.0.1", port=settings.PORT, reload=True, workers=1)
    else:
        uvicorn.run("app:app", host=settings.HOST, port=settings.PORT, reload=False, workers=1)
