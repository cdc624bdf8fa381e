import pytest

from fmodgen.models import ParameterModifier
from fmodgen.parsers import DOC_PAGES, parse_fragment, parse_parameter_modifiers

SYSTEM_PAGE = '''<h2 api="function" id="system_getversion"><a href="#system_getversion">System::getVersion</a></h2>
<div class="highlight language-text"><pre><span></span><span class="n">FMOD_RESULT</span> <span class="n">F_API</span> <span class="nf">FMOD_System_GetVersion</span><span class="p">(</span>
  <span class="n">FMOD_SYSTEM</span> <span class="o">*</span><span class="n">system</span><span class="p">,</span>
  <span class="kt">unsigned</span> <span class="kt">int</span> <span class="o">*</span><span class="n">version</span>
<span class="p">);</span>
</pre></div>
<dl>
<dt>version <span><a class="token" href="glossary.html#documentation-conventions" title="Output">Out</a></span></dt>
<dd>Version number.</dd>
</dl>
<h2 api="function" id="system_createsound"><a href="#system_createsound">System::createSound</a></h2>
<div class="highlight language-text"><pre><span></span><span class="n">FMOD_RESULT</span> <span class="n">F_API</span> <span class="nf">FMOD_System_CreateSound</span><span class="p">(</span>
<span class="p">);</span>
</pre></div>
<dl>
<dt>exinfo <span><a class="token" href="glossary.html#documentation-conventions" title="Optional">Opt</a></span></dt>
<dd>Pointer to a FMOD_CREATESOUNDEXINFO.</dd>
<dt>sound <span><a class="token" href="glossary.html#documentation-conventions" title="Output">Out</a></span></dt>
<dd>Newly created Sound object.</dd>
</dl>
'''


def test_doc_pages_cover_core_studio_and_plugins():
    assert len(DOC_PAGES) == 22
    assert "core-api-system.html" in DOC_PAGES
    assert "studio-api-eventinstance.html" in DOC_PAGES
    assert "plugin-api-dsp.html" in DOC_PAGES


def test_parse_fragment_attributes_badges_to_last_function():
    modifiers = parse_fragment(SYSTEM_PAGE)

    assert modifiers == {
        "FMOD_System_GetVersion+version": ParameterModifier.OUTPUT,
        "FMOD_System_CreateSound+exinfo": ParameterModifier.OPTIONAL,
        "FMOD_System_CreateSound+sound": ParameterModifier.OUTPUT,
    }


def test_parse_fragment_without_badges():
    assert parse_fragment("<p>No functions here.</p>") == {}


def test_parse_parameter_modifiers_merges_pages(tmp_path):
    first = tmp_path / "core-api-system.html"
    first.write_text(SYSTEM_PAGE, encoding="utf-8")
    second = tmp_path / "core-api-sound.html"
    second.write_text(
        '<span class="nf">FMOD_Sound_GetName</span>\n'
        '<dt>name <span><a class="token" href="glossary.html" title="Output">Out</a></span></dt>\n',
        encoding="utf-8",
    )

    modifiers = parse_parameter_modifiers([first, second])

    assert len(modifiers) == 4
    assert modifiers["FMOD_Sound_GetName+name"] is ParameterModifier.OUTPUT


def test_parse_parameter_modifiers_missing_page(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_parameter_modifiers([tmp_path / "core-api-system.html"])
