from pmc_site.database.contact.contact import Contacts
