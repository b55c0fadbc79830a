"""Step definitions for the demo feature"""
import re

from stepwright import given, then, when


@given('I open {string}')
def open_url(page, context, url):
    page.goto(url)


@when('I click on link {string}')
def click_link(page, context, label):
    link = page.get_by_role("link", name=label).first
    link.click()
    context.set_active_element(link)


@when('I fill the form')
def fill_form(page, context, table):
    for target, value in table[1:]:
        page.fill(target, context.resolve(value))


@then('I should see text {string}')
def see_text(page, context, text):
    page.get_by_text(text).first.wait_for(state="visible")


@then(re.compile(r'^the url should contain "(.*)"$'))
def url_contains(page, context, fragment):
    assert fragment in page.url, f"Expected '{fragment}' in {page.url}"
