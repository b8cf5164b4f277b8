from pymongo.results import InsertOneResult

from pmc_site.database.database_sessions import ContactStore
from pmc_site.models.contact import ContactModel


class Contacts:
    """
        Persistence for contact form submissions, one document per submission
    """

    def __init__(self, store: ContactStore):
        self.store = store

    def create(self, contact: ContactModel) -> InsertOneResult:
        """
            will insert a new contact document, the store connection is released on every exit path
        :param contact:
        :return:
        """
        with self.store.collection() as contacts:
            return contacts.insert_one(contact.to_document())
