import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from briefwriter.core.factory import create_generation_service


def main():
	load_dotenv()

	parser = argparse.ArgumentParser(description='BriefWriter')
	parser.add_argument('assignment_id', help='Assignment identifier')
	parser.add_argument('--brief', type=Path, help='Brief JSON file to register for this assignment')
	parser.add_argument('--user', default='local', help='Owning user id')
	parser.add_argument('--reset', action='store_true', help='Reset the assignment to DRAFT for regeneration')
	parser.add_argument('--progress', action='store_true', help='Show current status')

	args = parser.parse_args()

	service = create_generation_service()

	try:
		if args.reset:
			confirm = input('Are you sure you want to discard the generated content? (yes/no): ')
			if confirm.lower() == 'yes':
				service.regenerate(args.assignment_id)
				print('Assignment reset successfully')
			else:
				print('Reset cancelled')
			return

		if args.progress:
			status = service.get_status(args.assignment_id, args.user)
			print(f'\nAssignment: {args.assignment_id}')
			print(f'Status: {status["status"]}')
			print(f'Blocks generated: {status["blocks_generated"]}')
			print(f'Tokens used: {status["tokens_used"]}')
			if status.get('error'):
				print(f'Error: {status["error"]}')
			return

		if args.brief:
			with open(args.brief, encoding='utf-8') as f:
				service.register_assignment(args.assignment_id, args.user, json.load(f))

		print('Starting generation...')
		service.start_generation(args.assignment_id, args.user)
		assignment = service.runner.wait(args.assignment_id)
		print(f'Generation complete: {assignment.total_tokens_used} tokens, document at {assignment.document_path}')
	finally:
		service.runner.shutdown()


if __name__ == '__main__':
	try:
		main()
	except KeyboardInterrupt:
		print('\n\nGeneration interrupted.')
		sys.exit(0)
	except Exception as e:
		print(f'\nError: {e}')
		sys.exit(1)
