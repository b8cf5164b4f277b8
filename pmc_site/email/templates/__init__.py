import os

from jinja2 import Environment, FileSystemLoader, select_autoescape

env = Environment(loader=FileSystemLoader(os.path.dirname(__file__)),
                  autoescape=select_autoescape(['html']))


class EmailTemplate:
    """
        Used to create email templates based on Jinja2 for notification emails
    """

    def __init__(self, template=None):
        self.template = env.get_template(template)

    def render(self, **kwargs):
        return self.template.render(**kwargs)

    @staticmethod
    def contact_notification(name: str, email: str, subject: str, message: str, submitted_on: str) -> str:
        template = "contact_notification.html"
        return EmailTemplate(template).render(name=name, email=email, subject=subject, message=message,
                                              submitted_on=submitted_on)
