import pytest

FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom" xmlns:opensearch="http://a9.com/-/spec/opensearch/1.1/" xmlns:arxiv="http://arxiv.org/schemas/atom">
  <title type="html">ArXiv Query: search_query=&amp;id_list=2506.14767</title>
  <id>http://arxiv.org/api/cHxbiOdZaP56ODnBPIenZhzg5f8</id>
  <opensearch:totalResults>1</opensearch:totalResults>
  <entry>
    <id>http://arxiv.org/abs/2506.14767v2</id>
    <updated>2025-06-20T09:30:00Z</updated>
    <published>2025-06-17T17:59:59Z</published>
    <title>  Example   Title
    </title>
    <summary>  We study\tthings.
  Then we study   more things.
</summary>
    <author>
      <name>Ada Lovelace</name>
    </author>
    <author>
      <name>Alan Turing</name>
      <arxiv:affiliation>Bletchley Park</arxiv:affiliation>
    </author>
    <author>
      <name>Ada Lovelace</name>
    </author>
    <arxiv:doi>10.1000/example.1</arxiv:doi>
    <arxiv:comment>12 pages,
      3 figures</arxiv:comment>
    <link href="http://arxiv.org/abs/2506.14767v2" rel="alternate" type="text/html"/>
    <link title="pdf" href="http://arxiv.org/pdf/2506.14767v2" rel="related" type="application/pdf"/>
    <arxiv:primary_category term="cs.LG" scheme="http://arxiv.org/schemas/atom"/>
    <category term="cs.LG" scheme="http://arxiv.org/schemas/atom"/>
    <category term="cs.AI" scheme="http://arxiv.org/schemas/atom"/>
    <category term="" scheme=""/>
  </entry>
</feed>
"""

EMPTY_FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title type="html">ArXiv Query: id_list=9999.99999</title>
</feed>
"""

ABS_HTML = """<!DOCTYPE html>
<html lang="en">
<head><title>[2506.14767] Example Title</title><meta charset="utf-8"></head>
<body>
<div id="abs">
  <h1 class="title mathjax"><span class="descriptor">Title:</span>Example
     Title</h1>
  <div class="authors"><span class="descriptor">Authors:</span><a href="/a/lovelace_a_1">Ada Lovelace</a>, <a href="/a/turing_a_1">Alan&nbsp;Turing</a></div>
  <blockquote class="abstract mathjax">
    <span class="descriptor">Abstract:</span>We study things.
    Then we study more things.
  </blockquote>
  <div class="metatable">
    <table summary="Additional metadata">
      <tr><td class="tablecell label">Comments:</td><td class="tablecell comments mathjax">12 pages, 3 figures</td></tr>
      <tr><td class="tablecell label">Subjects:</td>
        <td class="tablecell subjects"><span class="primary-subject">Machine Learning (cs.LG)</span>; Artificial Intelligence (cs.AI)</td></tr>
      <tr><td class="tablecell label">Related DOI:</td>
        <td class="tablecell doi"><a href="https://doi.org/10.1000/example.1">https://doi.org/10.1000/example.1</a></td></tr>
    </table>
  </div>
</div>
<div class="submission-history">
  <h2>Submission history</h2> From: Ada Lovelace [<a href="/show-email/x">view email</a>]<br/>
  <strong><a href="/abs/2506.14767v1">[v1]</a></strong> Mon, 1 Jan 2024 (500kb)<br/>
  <strong>[v2]</strong> Tue, 2 Jan 2024 (510kb)<br/>
</div>
</body>
</html>
"""


@pytest.fixture
def feed_xml():
    return FEED_XML


@pytest.fixture
def empty_feed_xml():
    return EMPTY_FEED_XML


@pytest.fixture
def abs_html():
    return ABS_HTML
