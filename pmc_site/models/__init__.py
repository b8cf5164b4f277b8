from pmc_site.models.contact import ContactModel
