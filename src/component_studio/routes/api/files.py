"""
File API
========

Uploads (attachments for generation requests), serving stored uploads
and ZIP export of component code.
"""

from flask import Blueprint, current_app, jsonify, request, send_file, send_from_directory

from ...schemas import DownloadRequestSchema, load_or_raise
from ...services.archive_service import build_component_archive
from ...services.upload_service import save_uploads
from ..decorators import token_required

files_bp = Blueprint('files', __name__, url_prefix='/api')
uploads_bp = Blueprint('uploads', __name__)


@files_bp.route('/upload', methods=['POST'])
@token_required
def upload_files(user):
    stored = save_uploads(request.files.getlist('files'), current_app.config['UPLOAD_FOLDER'])
    current_app.logger.info(f"User {user.id} uploaded {len(stored)} file(s)")
    return jsonify({
        'message': 'Files uploaded successfully',
        'files': [f.to_dict() for f in stored],
    })


@files_bp.route('/download', methods=['POST'])
@token_required
def download_component(user):
    data = load_or_raise(DownloadRequestSchema(), request.get_json(silent=True))
    buffer, archive_name = build_component_archive(
        jsx=data.get('jsx') or '',
        tsx=data.get('tsx') or '',
        css=data.get('css') or '',
        filename=data.get('filename'),
    )
    return send_file(buffer, mimetype='application/zip', as_attachment=True, download_name=archive_name)


@uploads_bp.route('/uploads/<path:filename>', methods=['GET'])
def serve_upload(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
