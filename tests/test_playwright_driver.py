"""Test PlaywrightDriver extraction against realistic listing HTML in a real Chromium"""

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from healthjobs.adapters.healthjobs_uk.extraction import vacancy_from_card
from healthjobs.adapters.healthjobs_uk.selectors import (
    CARD_FIELDS,
    CARD_LINK_SELECTOR,
    CATEGORY_LINK_SELECTOR,
    CATEGORY_NAME_SELECTOR,
    JOB_CARD_SELECTOR,
)
from healthjobs.browser.driver import PlaywrightDriver
from healthjobs.config.settings import Settings

SAMPLE_HTML = """
<!DOCTYPE html>
<html>
<body>
<ul class="list-group">
  <li><a href="/job_list/s2/Nursing"><span class="hj-css-sector-default-buttons">Nursing &amp; Midwifery</span></a></li>
  <li><a href="/job_list/s2/Pharmacy">Pharmacy</a></li>
</ul>
<ul class="hj-results">
  <li class="hj-job">
    <a href="/job/UK/Leeds/Leeds_Teaching_Hospitals/Staff_Nurse-v5551234">
      <div class="hj-jobtitle">Staff Nurse - Ward 12</div>
    </a>
    <div class="hj-employername">Leeds Teaching Hospitals NHS Trust</div>
    <div class="hj-locationtown">Leeds</div>
    <div class="hj-salary">Salary: £28,407 - £34,581</div>
    <div class="hj-grade">Grade: Band 5</div>
  </li>
  <li class="hj-job">
    <a href="/job/UK/York/York_Hospital/Porter-v5559999">
      <div class="hj-jobtitle">Porter</div>
    </a>
    <div class="hj-employername">York and Scarborough Teaching Hospitals</div>
  </li>
</ul>
<div class="hj-jobdetails"><p>Visa sponsorship is available.</p></div>
</body>
</html>
"""


@pytest.fixture
async def driver():
    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=True)
        except PlaywrightError as e:
            pytest.skip(f"Chromium not installed: {e}")
        page = await browser.new_page()
        await page.set_content(SAMPLE_HTML)
        yield PlaywrightDriver(page, Settings(_env_file=None, SELECTOR_TIMEOUT=500))
        await browser.close()


async def test_extract_cards_with_missing_fields(driver):
    cards = await driver.extract_cards(JOB_CARD_SELECTOR, CARD_FIELDS, CARD_LINK_SELECTOR)

    assert len(cards) == 2
    nurse = vacancy_from_card(cards[0])
    assert nurse.title == "Staff Nurse - Ward 12"
    assert nurse.salary == "£28,407 - £34,581"
    assert nurse.grade == "Band 5"
    assert nurse.id == "hjuk_job/UK/Leeds/Leeds_Teaching_Hospitals/Staff_Nurse-v5551234"

    porter = cards[1]
    assert porter["salary"] == ""
    assert porter["speciality"] == ""


async def test_links_prefer_label_selector(driver):
    links = await driver.links(CATEGORY_LINK_SELECTOR, CATEGORY_NAME_SELECTOR)
    assert links == [
        {"name": "Nursing & Midwifery", "href": "/job_list/s2/Nursing"},
        {"name": "Pharmacy", "href": "/job_list/s2/Pharmacy"},
    ]


async def test_text_html_exists_and_wait(driver):
    assert await driver.exists(".hj-jobdetails")
    assert not await driver.exists(".does-not-exist")
    assert await driver.text(".hj-locationtown") == "Leeds"
    assert await driver.text(".does-not-exist") == ""
    assert await driver.html(".hj-jobdetails") == "<p>Visa sponsorship is available.</p>"
    assert await driver.wait_for(JOB_CARD_SELECTOR)
    assert not await driver.wait_for(".never-rendered", timeout=100)
