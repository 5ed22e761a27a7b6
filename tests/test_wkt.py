from app.proj.wkt import ProjectionText, WKTTag, classify_wkt, extract_name

UTM_14N = (
    'PROJCS["WGS_1984_UTM_Zone_14N",GEOGCS["GCS_WGS_1984",DATUM["D_WGS_1984",'
    'SPHEROID["WGS_1984",6378137.0,298.257223563]],PRIMEM["Greenwich",0.0],'
    'UNIT["Degree",0.0174532925199433]],PROJECTION["Transverse_Mercator"],'
    'PARAMETER["False_Easting",500000.0],PARAMETER["Central_Meridian",-99.0],UNIT["Meter",1.0]]'
)


def test_classify_by_top_level_keyword():
    assert classify_wkt(UTM_14N) is WKTTag.PROJECTED
    assert classify_wkt('GEOGCS["GCS_WGS_1984",DATUM["D_WGS_1984"]]') is WKTTag.GEOGRAPHIC
    # case-insensitive
    assert classify_wkt('projcs["x"]') is WKTTag.PROJECTED
    assert classify_wkt('GEOCCS["WGS 84 (geocentric)"]') is WKTTag.UNRECOGNIZED
    assert classify_wkt("") is WKTTag.UNRECOGNIZED


def test_name_is_first_quoted_segment():
    assert extract_name(UTM_14N) == "WGS_1984_UTM_Zone_14N"
    assert extract_name('GEOGCS["GCS_North_American_1983",DATUM["D_North_American_1983"]]') == "GCS_North_American_1983"


def test_name_needs_two_quotes():
    assert extract_name('PROJCS["WGS_1984_UTM_Zone_14N') == ""
    assert extract_name("PROJCS[WGS_1984_UTM_Zone_14N]") == ""
    assert extract_name('PROJCS["",GEOGCS') == ""


def test_projection_text_unrecognized_has_no_name():
    prj = ProjectionText('GEOCCS["WGS 84 (geocentric)",DATUM["WGS_1984"]]')
    assert prj.tag is WKTTag.UNRECOGNIZED
    assert prj.name == ""

    prj = ProjectionText(UTM_14N)
    assert prj.tag is WKTTag.PROJECTED
    assert prj.name == "WGS_1984_UTM_Zone_14N"
