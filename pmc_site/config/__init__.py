from pmc_site.config.config import config_instance, Settings, DatabaseSettings, EmailSettings
