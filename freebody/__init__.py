from .symbols import DEFAULT_SYMBOLS, SymbolTable, as_symbol_table
from .expression import ExpressionError, evaluate, evaluate_expression, substitute_symbols
from .document import (
    BodyNode,
    DocumentError,
    ForceNode,
    PointNode,
    ProblemDocument,
    document_from_mapping,
    load_document,
    read_problem_xml,
)
from .validate import validate_document, ValidationError
from .model import (
    CoordinateConvention,
    Direction,
    Force,
    ParseWarning,
    Point,
    Problem,
    RigidBody,
)
from .parser import parse_problem, reparse, geometry_signature, ProblemParseError
from .arcs import (
    ArcConfig,
    ArcGeometry,
    BoundingBox,
    Thumbnail,
    UnknownBodyError,
    ac_arc_config,
    arc_body_names,
    arc_points,
    calculate_bounding_box,
    cb_arc_config,
    generate_arc,
    generate_arc_path,
    generate_thumbnail,
    register_arc_body,
    sample_arc,
    to_display_frame,
)
from .arrows import ArrowGeometry, annotation_arrow, arrow_geometry, arrow_length
from .canvas import (
    AnnotationKind,
    CanvasEngine,
    CanvasSnapshot,
    CanvasState,
    DroppedBody,
    ForceAnnotation,
    Selection,
    SnapCandidate,
    SnapPointState,
    SnapPointView,
    find_snap_candidates,
    world_position,
)
from .palette import PaletteEntry, PaletteKind, palette_entries, place_from_palette
from .catalog import LoadResult, ProblemCatalog, default_catalog, PROBLEM_6_XML
from .printer import print_problem
from .config import (
    CanvasConfig,
    ParserConfig,
    get_canvas_config,
    get_parser_config,
    set_canvas_config,
    set_parser_config,
)

__all__ = [
    'DEFAULT_SYMBOLS',
    'SymbolTable',
    'as_symbol_table',
    'ExpressionError',
    'evaluate',
    'evaluate_expression',
    'substitute_symbols',
    'BodyNode',
    'DocumentError',
    'ForceNode',
    'PointNode',
    'ProblemDocument',
    'document_from_mapping',
    'load_document',
    'read_problem_xml',
    'validate_document',
    'ValidationError',
    'CoordinateConvention',
    'Direction',
    'Force',
    'ParseWarning',
    'Point',
    'Problem',
    'RigidBody',
    'parse_problem',
    'reparse',
    'geometry_signature',
    'ProblemParseError',
    'ArcConfig',
    'ArcGeometry',
    'BoundingBox',
    'Thumbnail',
    'UnknownBodyError',
    'ac_arc_config',
    'arc_body_names',
    'arc_points',
    'calculate_bounding_box',
    'cb_arc_config',
    'generate_arc',
    'generate_arc_path',
    'generate_thumbnail',
    'register_arc_body',
    'sample_arc',
    'to_display_frame',
    'ArrowGeometry',
    'annotation_arrow',
    'arrow_geometry',
    'arrow_length',
    'AnnotationKind',
    'CanvasEngine',
    'CanvasSnapshot',
    'CanvasState',
    'DroppedBody',
    'ForceAnnotation',
    'Selection',
    'SnapCandidate',
    'SnapPointState',
    'SnapPointView',
    'find_snap_candidates',
    'world_position',
    'PaletteEntry',
    'PaletteKind',
    'palette_entries',
    'place_from_palette',
    'LoadResult',
    'ProblemCatalog',
    'default_catalog',
    'PROBLEM_6_XML',
    'print_problem',
    'CanvasConfig',
    'ParserConfig',
    'get_canvas_config',
    'get_parser_config',
    'set_canvas_config',
    'set_parser_config',
]
