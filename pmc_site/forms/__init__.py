from pmc_site.forms.parser import parse_form, FORM_FIELDS
